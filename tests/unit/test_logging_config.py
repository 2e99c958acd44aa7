from __future__ import annotations

import logging

import pytest

from leadshub import logging_config
from leadshub.config import Settings


def test_import_logger_gets_its_own_level(monkeypatch) -> None:
    monkeypatch.setattr(logging_config, "_LOG_CONFIGURED", False)
    import_logger = logging.getLogger("leadshub.core.importer")
    previous = import_logger.level
    try:
        logging_config.configure_logging(Settings(log_level="info", import_log_level="warning"))

        assert import_logger.level == logging.WARNING
        assert not import_logger.isEnabledFor(logging.INFO)
    finally:
        import_logger.setLevel(previous)


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(import_log_level="chatty")
