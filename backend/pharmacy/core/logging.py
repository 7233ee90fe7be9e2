"""Root logging setup. `LOG_JSON` switches to one JSON object per line."""

import json
import logging
from datetime import datetime, timezone

from pharmacy.core.config import Settings, get_settings

# Attributes passed through `extra=` that are copied into JSON records
CONTEXT_FIELDS = ("error_id", "method", "path", "transaction_id", "product_id")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}
        )
        if record.exc_info:
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter()
        if settings.LOG_JSON
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s", "%Y-%m-%dT%H:%M:%S")
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
