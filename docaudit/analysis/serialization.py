import json
from dataclasses import asdict
from datetime import date, datetime
from typing import Any


def _default(value: object) -> object:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json_dict(obj: Any) -> dict[str, Any]:
    """Convert an analysis dataclass into a JSONB-ready dict."""
    return json.loads(json.dumps(asdict(obj), default=_default))
