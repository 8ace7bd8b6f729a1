import logging
import logging.config
import os
from datetime import datetime
from hr_approvals.core.config import settings

def setup_logging():
    """Setup application logging configuration"""

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    }
    root_handlers = ["console"]

    if settings.LOG_TO_FILE:
        os.makedirs(os.path.join(settings.LOG_DIR, "app"), exist_ok=True)
        os.makedirs(os.path.join(settings.LOG_DIR, "error"), exist_ok=True)

        # Get current date for log file naming
        current_date = datetime.now().strftime("%Y-%m-%d")

        handlers["app_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "filename": os.path.join(settings.LOG_DIR, "app", f"app-{current_date}.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 10,
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": os.path.join(settings.LOG_DIR, "error", f"error-{current_date}.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 10,
        }
        root_handlers += ["app_file", "error_file"]

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s:%(lineno)d - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {  # Root logger
                "level": settings.LOG_LEVEL,
                "handlers": root_handlers,
                "propagate": False,
            },
            "hr_approvals.services.approval": {
                "level": settings.LOG_LEVEL,
                "handlers": root_handlers,
                "propagate": False,
            },
            "access": {
                "level": "INFO",
                "handlers": root_handlers,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",  # Reduce DB query noise
                "handlers": root_handlers,
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)

    logger = logging.getLogger(__name__)
    logger.info("HR approvals service - logging configured")
    logger.info(f"Log level: {settings.LOG_LEVEL}")
