import json
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


RELAY_EVENTS = ("start", "stop", "frame", "status")
CONTROL_EVENTS = ("start", "stop")
ROOM_PREFIX = "classlink"


class Role(str, Enum):
    DESKTOP = "desktop"
    MOBILE = "mobile"


class NamedSession(BaseModel):
    """Session joined through a caller-supplied sid."""

    kind: Literal["named"] = "named"
    sid: str = Field(..., min_length=1, description="Session identifier shared by desktop and mobile.")

    @property
    def room(self) -> str:
        return f"{ROOM_PREFIX}:{self.sid}"


class AnonymousSession(BaseModel):
    """Fallback session for a connection without sid; nobody else can join it."""

    kind: Literal["anonymous"] = "anonymous"
    connection_id: str

    @property
    def room(self) -> str:
        return f"{ROOM_PREFIX}:anonymous:{self.connection_id}"


class HandshakeParams(BaseModel):
    role: Role = Role.DESKTOP
    session: Union[NamedSession, AnonymousSession] = Field(..., discriminator="kind")

    @field_validator("role", mode="before")
    @classmethod
    def default_unknown_role(cls, value):
        if isinstance(value, Role):
            return value
        try:
            return Role(str(value or "").strip().lower())
        except ValueError:
            return Role.DESKTOP

    @classmethod
    def from_query(cls, role: Optional[str], sid: Optional[str], connection_id: str) -> "HandshakeParams":
        sid = (sid or "").strip()
        session: Union[NamedSession, AnonymousSession]
        if sid:
            session = NamedSession(sid=sid)
        else:
            session = AnonymousSession(connection_id=connection_id)
        return cls(role=role, session=session)

    @property
    def room(self) -> str:
        return self.session.room

    @property
    def label(self) -> str:
        if isinstance(self.session, NamedSession):
            return self.session.sid
        return self.session.connection_id


class FramePayload(BaseModel):
    """Mobile -> desktop frame. Documented shape only; the relay forwards frames unchecked."""

    model_config = ConfigDict(extra="allow")

    seq: int = Field(..., description="Sender-side sequence number.")
    ts: int = Field(..., description="Capture timestamp in milliseconds.")
    data: Any = Field(..., description="Opaque frame data (e.g. base64 image).")


class RelayEnvelope(BaseModel):
    """Every relay message on the wire: {"event": name, "data": payload}."""

    event: Literal["start", "stop", "frame", "status"]
    data: Optional[Any] = None


def encode_event(event: str, data: Any = None) -> str:
    message: Dict[str, Any] = {"event": event}
    if data is not None:
        message["data"] = data
    return json.dumps(message)


def decode_event_name(message: str) -> Optional[str]:
    """Return the event name of a relay message, or None when it is not one."""
    try:
        payload = json.loads(message)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(payload, dict):
        return None
    event = payload.get("event")
    if event not in RELAY_EVENTS:
        return None
    return event


class SchemaDocument(BaseModel):
    """Documentation payload served at /docs for quick reference."""

    websocket_endpoints: Dict[str, str]
    websocket_events: Dict[str, Dict[str, Any]]
    http_endpoints: Dict[str, str]
    request_schemas: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    examples: Dict[str, Any] = Field(default_factory=dict)
    notes: List[str] = []
