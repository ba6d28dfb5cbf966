"""Pydantic models for relay events, chat/sketch requests and uploads."""

from .messages import (
    AnonymousSession,
    FramePayload,
    HandshakeParams,
    NamedSession,
    RelayEnvelope,
    Role,
    SchemaDocument,
    decode_event_name,
    encode_event,
)
from .chat import ChatMessage, ChatRequest, Sketch, SketchLayer, SketchRequest, TextStroke
from .uploads import CreateFolderRequest, Folder, UploadRecord

__all__ = [
    "AnonymousSession",
    "FramePayload",
    "HandshakeParams",
    "NamedSession",
    "RelayEnvelope",
    "Role",
    "SchemaDocument",
    "decode_event_name",
    "encode_event",
    "ChatMessage",
    "ChatRequest",
    "Sketch",
    "SketchLayer",
    "SketchRequest",
    "TextStroke",
    "CreateFolderRequest",
    "Folder",
    "UploadRecord",
]
