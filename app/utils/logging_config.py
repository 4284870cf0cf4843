import logging.config

LOGGER_NAME = "cosmetic_erp"


def configure_logging(level: str = "INFO") -> None:
    """Configura la salida por consola del logger del proyecto.

    Los módulos obtienen su logger con `logging.getLogger(f"{LOGGER_NAME}.<modulo>")`
    para heredar esta configuración.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "verbose": {
                    "format": "{levelname} {asctime} {name} {message}",
                    "style": "{",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "verbose",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": "WARNING",
            },
            "loggers": {
                LOGGER_NAME: {
                    "handlers": ["console"],
                    "level": level.upper(),
                    "propagate": False,
                },
            },
        }
    )
