"""Bot run-state and control acknowledgement models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from core.errors import MalformedDataError
from core.models.fields import as_bool, as_optional_timestamp, require_mapping
from core.modes import Mode


@dataclass(frozen=True)
class BotStatus:
    """The bot's own state. Not mode-scoped: it may disagree with the viewed mode."""
    mode: Optional[Mode]
    is_running: bool
    last_run: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any) -> "BotStatus":
        data = require_mapping(data, "status")
        raw_mode = data.get("mode")
        try:
            mode = Mode.parse(raw_mode) if raw_mode is not None else None
        except ValueError as e:
            raise MalformedDataError(f"status: {e}") from None
        return cls(
            mode=mode,
            is_running=as_bool(data, "is_running", "status"),
            last_run=as_optional_timestamp(data, "last_run", "status"),
        )


@dataclass(frozen=True)
class ControlAck:
    """Acknowledgement for start/stop/reset commands."""
    status: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status.lower() == "success"

    @classmethod
    def from_dict(cls, data: Any) -> "ControlAck":
        data = require_mapping(data, "ack")
        return cls(
            status=str(data.get("status", "")),
            message=str(data.get("message", "")),
        )
