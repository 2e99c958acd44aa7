from __future__ import annotations

import logging

from leadshub.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# one line per imported row; tuned separately from the rest of the app
IMPORT_LOGGER = "leadshub.core.importer"

_LOG_CONFIGURED = False


def configure_logging(settings: Settings | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
    logging.getLogger(IMPORT_LOGGER).setLevel(getattr(logging, settings.import_log_level))
    _LOG_CONFIGURED = True
