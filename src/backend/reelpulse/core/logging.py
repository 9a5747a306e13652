from __future__ import annotations

import logging
import re
from logging.config import dictConfig
from typing import Iterable

from .config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "botocore", "urllib3")


def _mask_secret(secret: str, visible: int = 4) -> str:
    if len(secret) <= visible:
        return "*" * len(secret)
    return secret[:visible] + "*" * (len(secret) - visible)


class SecretMaskFilter(logging.Filter):
    """Mask provider credentials in rendered messages and formatted tracebacks."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        super().__init__()
        unique = {secret.strip() for secret in secrets if secret and secret.strip()}
        # Longest first so a key that contains another is masked whole.
        ordered = sorted(unique, key=len, reverse=True)
        self._pattern = re.compile("|".join(re.escape(secret) for secret in ordered)) if ordered else None

    def mask(self, text: str) -> str:
        if self._pattern is None or not text:
            return text
        return self._pattern.sub(lambda match: _mask_secret(match.group(0)), text)

    def filter(self, record: logging.LogRecord) -> bool:
        if self._pattern is None:
            return True

        message = record.getMessage()
        masked = self.mask(message)
        if masked != message:
            record.msg = masked
            record.args = ()

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.mask(record.exc_text)
        return True


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "filters": {
                "mask_secrets": {"()": SecretMaskFilter, "secrets": settings.secret_values()},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["mask_secrets"],
                }
            },
            "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
            "root": {"level": settings.log_level.upper(), "handlers": ["console"]},
        }
    )
