# medtrace/config/logging.py

import json
import logging
from datetime import datetime, timezone

from medtrace.core.context import actor_id_ctx, correlation_id_ctx

# Structured fields passed via `extra=` that end up in the JSON line.
EXTRA_FIELDS = ("product_id", "transaction_id", "kind", "settlement_id", "memo", "error")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "correlation_id": correlation_id_ctx.get(),
            "actor_id": actor_id_ctx.get(),
        }
        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value
        return json.dumps(log_record)


def configure_logging(log_level: str):
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
