"""Request/response helpers shared by the JSON controllers."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from flask import request

from ..core.exceptions import ValidationError
from .datetime_utils import optional_date


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def query_date(name: str) -> Optional[date]:
    return optional_date(request.args.get(name), name)


def query_str(name: str) -> Optional[str]:
    value = (request.args.get(name) or "").strip()
    return value or None


def json_value(value: Any) -> Any:
    """Render dates as ISO strings, money as floats and enums as their values."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [json_value(v) for v in value]
    return value
