import logging

from tornado.iostream import StreamClosedError

from mathboard.handlers.base import JsonHandler, generation_error
from mathboard.models import ChatRequest
from mathboard.services.errors import GenerationError
from mathboard.services.gemini_service import GeminiService


logger = logging.getLogger(__name__)


class ChatHandler(JsonHandler):
    def initialize(self, gemini_service: GeminiService):
        self.gemini_service = gemini_service

    async def post(self):
        request = self.parse_body(ChatRequest, "messages array required")
        try:
            reply = await self.gemini_service.chat(request.messages)
        except GenerationError as exc:
            logger.error("Chat request failed: %s", exc)
            raise generation_error(exc)
        self.write_json({"reply": reply})


class ChatStreamHandler(JsonHandler):
    """Streams the reply as raw chunked text; there are no message boundaries."""

    def initialize(self, gemini_service: GeminiService):
        self.gemini_service = gemini_service

    async def post(self):
        request = self.parse_body(ChatRequest, "messages array required")
        started = False
        try:
            async for delta in self.gemini_service.stream_chat(request.messages):
                if not started:
                    self.set_header("Content-Type", "text/plain; charset=utf-8")
                    self.set_header("Cache-Control", "no-cache")
                    self.set_header("X-Accel-Buffering", "no")
                    started = True
                self.write(delta)
                await self.flush()
        except StreamClosedError:
            logger.info("Chat stream client disconnected")
            return
        except GenerationError as exc:
            if not started:
                logger.error("Chat stream failed before first chunk: %s", exc)
                raise generation_error(exc)
            # Headers are already sent; end the stream without a trailer.
            logger.warning("Chat stream failed mid-stream: %s", exc)
        if not started:
            self.set_header("Content-Type", "text/plain; charset=utf-8")
        self.finish()
