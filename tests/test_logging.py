import logging

import pytest

from reelpulse.core.config import Settings
from reelpulse.core.logging import SecretMaskFilter, configure_logging


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("reelpulse.test", logging.INFO, __file__, 1, msg, args, None)


def test_secret_mask_filter_masks_formatted_arguments() -> None:
    record = _record("calling provider with key=%s", "sk-ant-1234567890")

    assert SecretMaskFilter(["sk-ant-1234567890"]).filter(record) is True
    assert record.getMessage() == "calling provider with key=sk-a*************"
    assert record.args == ()


def test_secret_mask_filter_prefers_longest_secret() -> None:
    record = _record("tokens abcd1234 and abcd1234efgh")

    SecretMaskFilter(["abcd1234", "abcd1234efgh", "", "  "]).filter(record)

    assert "abcd1234efgh" not in record.getMessage()
    assert "abcd1234" not in record.getMessage()


def test_secret_mask_filter_leaves_clean_records_untouched() -> None:
    record = _record("nothing to hide %d", 3)

    SecretMaskFilter(["secret-value"]).filter(record)

    assert record.args == (3,)
    assert record.getMessage() == "nothing to hide 3"


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_configure_logging_installs_mask_filter(restore_root_logger: logging.Logger) -> None:
    settings = Settings(_env_file=None, anthropic_api_key="sk-secret-value", log_level="debug")

    configure_logging(settings)

    root = restore_root_logger
    assert root.level == logging.DEBUG
    filters = [flt for handler in root.handlers for flt in handler.filters]
    assert any(isinstance(flt, SecretMaskFilter) for flt in filters)
    assert logging.getLogger("httpx").level == logging.WARNING
