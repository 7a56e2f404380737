import sys
import logging
from typing import Any, Optional

from loguru import logger

from autowin.config.settings import settings

# Credentials handed to clients directly, masked alongside the configured key
_registered_secrets: set[str] = set()


def register_secret(value: Optional[str]) -> None:
    """Mask ``value`` in every log message from now on."""
    if value:
        _registered_secrets.add(value)


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""
    sensitive_keys = ["key", "token", "password", "secret", "auth"]

    def mask_value(value: str) -> str:
        if len(value) > 8:
            return value[:4] + "****" + value[-4:]
        return "********"

    # Mask string values in 'extra' whose key looks sensitive
    extra = record.get("extra")
    if isinstance(extra, dict):
        for extra_key, extra_value in extra.items():
            if isinstance(extra_value, str) and any(
                sk in extra_key.lower() for sk in sensitive_keys
            ):
                extra[extra_key] = mask_value(extra_value)

    # API keys are sent as headers; never let one reach a sink verbatim
    secrets = set(_registered_secrets)
    if settings.tba_auth_key:
        secrets.add(settings.tba_auth_key)
    for secret in secrets:
        if secret in record["message"]:
            record["message"] = record["message"].replace(secret, "********")

    return True  # Keep the record after filtering/masking


def setup_logging(level: Optional[str] = None) -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    log_level = (level or settings.log_level).upper()

    logger.add(
        sys.stderr,
        level=log_level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=False,  # Tracebacks would otherwise print header values
        filter=sensitive_data_filter,
    )

    logger.debug(f"Logging initialized with level: {log_level}")

    # Intercept standard logging messages (httpx logs through it)
    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            # Get corresponding Loguru level if it exists
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            # Find caller from where originated the logged message
            frame, depth = logging.currentframe(), 2
            while frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(
                level, record.getMessage()
            )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Standard logging intercepted.")
