"""Structured Logging — one JSON object per line, ledger context as top-level keys.

Invariants:
    - Every line has timestamp, level, logger and message
    - Ledger context passed via `extra=` (account_id, item_name, amount, quantity,
      error_code, attempt, delay_ms, path) is copied only when present
    - setup_logging is idempotent: a second call replaces the handler it
      installed earlier instead of adding another
"""

import json
import logging
from datetime import datetime, timezone

LEDGER_FIELDS = (
    "account_id", "item_name", "amount", "quantity",
    "error_code", "attempt", "delay_ms", "path",
)

_HANDLER_NAME = "merchshop"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: getattr(record, key)
            for key in LEDGER_FIELDS
            if getattr(record, key, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the MerchShop handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Statement echo would log every balance update
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
