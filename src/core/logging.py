"""structlog configuration bridged onto the stdlib handlers from ``LOGGING``."""

import structlog


def configure_structlog() -> None:
    """Route structlog events through stdlib logging.

    Rendering happens in ``structlog.stdlib.ProcessorFormatter`` (see
    ``settings.LOGGING``) so Django's own log records and application events
    share one output format.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


__all__ = ["configure_structlog"]
