import logging

from mathboard.handlers.base import JsonHandler, generation_error
from mathboard.models import SketchRequest
from mathboard.services.errors import GenerationError, SketchOutputError
from mathboard.services.gemini_service import GeminiService


logger = logging.getLogger(__name__)


class SketchHandler(JsonHandler):
    def initialize(self, gemini_service: GeminiService):
        self.gemini_service = gemini_service

    async def post(self):
        request = self.parse_body(SketchRequest, "prompt required")
        try:
            sketch = await self.gemini_service.generate_sketch(request.prompt)
        except SketchOutputError as exc:
            logger.error("Unusable sketch output (%s): %.200s", exc.code, exc.raw)
            raise generation_error(exc)
        except GenerationError as exc:
            logger.error("Sketch request failed: %s", exc)
            raise generation_error(exc)
        self.write_json({"sketch": sketch})
