"""Utility functions for the property agent."""
import json
import logging
import re
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from .config import ASSISTANT_NAME, LOG_LEVEL
from .models import ChatTurn, Property

_CONFIGURED = False
_FENCE_RE = re.compile(r"```(?:json|JSON)?")

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _safe_value(value: Any) -> Any:
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including the fields passed via ``extra=``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_"):
                continue
            payload[key] = _safe_value(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""
    global _CONFIGURED
    if not _CONFIGURED:
        level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
        root = logging.getLogger()
        if not root.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JsonFormatter())
            root.addHandler(handler)
        root.setLevel(level)
        _CONFIGURED = True
    return logging.getLogger(name)


def format_price(amount: Optional[float]) -> str:
    """1500000 -> '$1,500,000'."""
    if amount is None:
        return "$?"
    return f"${int(round(amount)):,}"


def strip_code_fences(text: str) -> str:
    """Remove markdown fences a model likes to wrap JSON in."""
    return _FENCE_RE.sub("", text or "").strip()


def history_from_payload(items: Optional[Iterable[Dict[str, Any]]]) -> List[ChatTurn]:
    """Convert the client's ``[{sender, text}]`` history into ChatTurns.

    Any sender other than "user" is treated as the assistant.
    """
    turns: List[ChatTurn] = []
    for item in items or []:
        text = item.get("text")
        if not isinstance(text, str) or not text.strip():
            continue
        speaker = "user" if item.get("sender") == "user" else "assistant"
        turns.append(ChatTurn(speaker=speaker, text=text))
    return turns


def render_history(turns: List[ChatTurn], limit: int) -> str:
    """Render the most recent turns as 'Speaker: text' lines."""
    if limit <= 0:
        return ""
    lines = []
    for turn in turns[-limit:]:
        speaker = "User" if turn.speaker == "user" else ASSISTANT_NAME
        lines.append(f"{speaker}: {turn.text}")
    return "\n".join(lines)


def property_from_dict(data: Dict[str, Any]) -> Property:
    """Build a Property from a catalog record, keeping unknown keys in ``extra``."""
    known = {"id", "title", "location", "price", "bedrooms", "bathrooms", "size", "amenities"}
    return Property(
        id=data["id"],
        title=str(data.get("title") or ""),
        location=str(data.get("location") or ""),
        price=int(data.get("price") or 0),
        bedrooms=int(data.get("bedrooms") or 0),
        bathrooms=data.get("bathrooms"),
        size=data.get("size"),
        amenities=list(data.get("amenities") or []),
        extra={k: v for k, v in data.items() if k not in known},
    )


def serialize_property(p: Property) -> Dict[str, Any]:
    """Convert Property to the flat JSON record the client expects."""
    data = asdict(p)
    extra = data.pop("extra") or {}
    return {**extra, **data}
