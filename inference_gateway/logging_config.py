"""
Logging utilities for the inference gateway

Routes stdlib logging (uvicorn, httpx) and structlog through one handler.
"""

import logging
import logging.config

import structlog

DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout',
        },
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
    'loggers': {
        'httpx': {
            'level': 'WARNING',
        },
    },
}


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Setup logging configuration

    Args:
        log_level: Root log level
        log_format: 'json' for machine readable lines, 'console' for development
    """
    log_level = log_level.upper()

    config = {
        **DEFAULT_LOGGING_CONFIG,
        'handlers': {
            name: {**handler, 'level': log_level}
            for name, handler in DEFAULT_LOGGING_CONFIG['handlers'].items()
        },
        'root': {**DEFAULT_LOGGING_CONFIG['root'], 'level': log_level},
    }
    logging.config.dictConfig(config)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if log_format == "console":
        # ConsoleRenderer prints tracebacks itself
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # create_app may reconfigure; bound loggers must not pin the first setup
        cache_logger_on_first_use=False,
    )

