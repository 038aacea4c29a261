from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime, timezone

# Location prefixes FastAPI puts in front of the field name
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


class Message(BaseModel):
    msg: str


class ErrorResponse(BaseModel):
    """Error body shared by every failing response"""
    msg: str
    error_code: str
    details: Optional[Dict[str, Any]] = None
    request_id: str = "unknown"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def to_field_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error entries into ``[{"field": ..., "message": ...}]``."""
    fields = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        fields.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return fields
