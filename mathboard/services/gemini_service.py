import json
import logging
import os
import re
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence, Tuple

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from mathboard.models import ChatMessage
from mathboard.services import prompts
from mathboard.services.errors import GenerationError, MissingApiKeyError, SketchFormatError, SketchParseError


logger = logging.getLogger(__name__)

DEFAULT_MODEL_ID = "gemini-2.5-flash"
EXAM_LAYER_PATTERN = re.compile(r"klausur|beispiel", re.IGNORECASE)
# google-genai wraps HTTP error responses but lets httpx transport errors through
UPSTREAM_ERRORS = (genai_errors.APIError, httpx.HTTPError)


class GeminiService:
    """Service wrapper around the Gemini API for tutor chat and whiteboard sketches."""

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        model_id: Optional[str] = None,
        prompt_text: Optional[str] = None,
    ):
        # The client is created on first use so the server starts without a key.
        self._client = client
        self.model_id = model_id or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL_ID
        self.system_prompt = prompt_text or prompts.TUTOR_SYSTEM_PROMPT

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            api_key = (os.getenv("GEMINI_API_KEY") or "").strip()
            if not api_key:
                raise MissingApiKeyError()
            self._client = genai.Client(api_key=api_key)
        return self._client

    def _build_contents(self, messages: Sequence[ChatMessage]) -> Tuple[str, List[types.Content]]:
        """Split chat messages into a system instruction and Gemini contents."""
        system_parts = [self.system_prompt]
        contents: List[types.Content] = []
        for message in messages:
            if message.role == "system":
                system_parts.append(message.content)
                continue
            role = "model" if message.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part.from_text(text=message.content)]))
        return "\n\n".join(system_parts), contents

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        system_instruction, contents = self._build_contents(messages)
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_id,
                contents=contents,
                config=types.GenerateContentConfig(system_instruction=system_instruction),
            )
        except UPSTREAM_ERRORS as exc:
            raise GenerationError(str(exc)) from exc
        return response.text or ""

    async def stream_chat(self, messages: Sequence[ChatMessage]) -> AsyncIterator[str]:
        """Yield non-empty text fragments as Gemini produces them."""
        system_instruction, contents = self._build_contents(messages)
        try:
            stream = await self.client.aio.models.generate_content_stream(
                model=self.model_id,
                contents=contents,
                config=types.GenerateContentConfig(system_instruction=system_instruction),
            )
            async for chunk in stream:
                delta = chunk.text
                if delta:
                    yield delta
        except UPSTREAM_ERRORS as exc:
            raise GenerationError(str(exc)) from exc

    async def _generate_json_text(self, system_instruction: str, user_prompt: str) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_id,
                contents=user_prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                ),
            )
        except UPSTREAM_ERRORS as exc:
            raise GenerationError(str(exc)) from exc
        return response.text or ""

    async def generate_sketch(self, topic: str) -> Dict[str, Any]:
        """
        Ask for whiteboard JSON and validate its top-level shape.

        Raises SketchParseError when the text is not JSON and SketchFormatError
        when neither "layers" nor "strokes" is a list; both keep the raw text.
        A sketch without an exam-example layer gets one from a second call.
        """
        raw = await self._generate_json_text(prompts.SKETCH_SYSTEM_PROMPT, prompts.sketch_user_prompt(topic))
        try:
            sketch = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SketchParseError(raw) from exc
        if not isinstance(sketch, dict) or not (
            isinstance(sketch.get("layers"), list) or isinstance(sketch.get("strokes"), list)
        ):
            raise SketchFormatError(raw)

        if not has_exam_layer(sketch):
            exam_layers = await self._generate_exam_layers(topic)
            if exam_layers:
                existing = sketch.get("layers")
                sketch["layers"] = (existing if isinstance(existing, list) else []) + exam_layers
        return sketch

    async def _generate_exam_layers(self, topic: str) -> List[Dict[str, Any]]:
        # Best effort: the first sketch is still returned if this call fails.
        try:
            raw = await self._generate_json_text(
                prompts.EXAM_LAYER_SYSTEM_PROMPT, prompts.exam_layer_user_prompt(topic)
            )
            parsed = json.loads(raw)
        except (GenerationError, json.JSONDecodeError) as exc:
            logger.warning("Exam layer generation failed for %r: %s", topic, exc)
            return []
        layers = parsed.get("layers") if isinstance(parsed, dict) else None
        if not isinstance(layers, list):
            logger.warning("Exam layer response for %r had no layers list", topic)
            return []
        return layers


def has_exam_layer(sketch: Dict[str, Any]) -> bool:
    layers = sketch.get("layers")
    if not isinstance(layers, list):
        return False
    return any(isinstance(layer, dict) and EXAM_LAYER_PATTERN.search(str(layer.get("name") or "")) for layer in layers)
