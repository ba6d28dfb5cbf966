from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: StrictStr


class ChatRequest(BaseModel):
    """Body of /api/chat and /api/chat/stream."""

    messages: List[ChatMessage] = Field(..., min_length=1)


class SketchRequest(BaseModel):
    prompt: StrictStr = Field(..., min_length=1, description="Topic to sketch on the whiteboard.")


class TextStroke(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["text"] = "text"
    position: List[float] = Field(..., min_length=2, max_length=2, description="Normalised [x, y].")
    text: str
    size: Optional[float] = Field(default=None, description="Font size relative to board height.")
    color: Optional[str] = None


class SketchLayer(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    strokes: List[Dict[str, Any]] = Field(default_factory=list)


class Sketch(BaseModel):
    """
    Whiteboard JSON expected from the model. Returned to the client as parsed;
    this model documents the shape for /docs.
    """

    model_config = ConfigDict(extra="allow")

    layers: Optional[List[SketchLayer]] = None
    strokes: Optional[List[Dict[str, Any]]] = None
    steps: Optional[List[str]] = None
