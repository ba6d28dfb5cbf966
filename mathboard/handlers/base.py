import json
from typing import Any, Dict, List, Optional, Type, TypeVar

import tornado.web
from pydantic import BaseModel, ValidationError

from mathboard.services.errors import GenerationError, MissingApiKeyError, SketchOutputError


MAX_JSON_BODY_BYTES = 1024 * 1024

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiError(tornado.web.HTTPError):
    """HTTPError whose JSON body is ``{"error": message, **extra}``."""

    def __init__(self, status_code: int, message: str, **extra: Any):
        # log_message is %-formatted by tornado's request logging
        super().__init__(status_code, reason=None, log_message=message.replace("%", "%%"))
        self.payload: Dict[str, Any] = {"error": message, **extra}


def parse_origins(raw: Optional[str]) -> List[str]:
    origins = [origin.strip().rstrip("/") for origin in (raw or "*").split(",") if origin.strip()]
    return origins or ["*"]


def origin_allowed(origin: Optional[str], allowed_origins: List[str]) -> bool:
    if "*" in allowed_origins:
        return True
    return bool(origin) and origin.rstrip("/") in allowed_origins


def generation_error(exc: GenerationError) -> ApiError:
    """Map a service failure onto the 500 response the facade returns for it."""
    if isinstance(exc, SketchOutputError):
        return ApiError(500, exc.message, code=exc.code, raw=exc.raw)
    if isinstance(exc, MissingApiKeyError):
        return ApiError(500, str(exc))
    return ApiError(500, "generation request failed", detail=str(exc))


class JsonHandler(tornado.web.RequestHandler):
    """Base for the HTTP facade: JSON bodies, JSON errors, CORS headers."""

    def set_default_headers(self):
        allowed = self.settings.get("allowed_origins", ["*"])
        origin = self.request.headers.get("Origin")
        if "*" in allowed:
            self.set_header("Access-Control-Allow-Origin", "*")
        elif origin_allowed(origin, allowed):
            self.set_header("Access-Control-Allow-Origin", origin)
            self.set_header("Vary", "Origin")
        self.set_header("Access-Control-Allow-Methods", "GET, POST, DELETE, OPTIONS")
        self.set_header("Access-Control-Allow-Headers", "Content-Type")

    def options(self, *args):
        self.set_status(204)
        self.finish()

    def write_json(self, payload: Dict[str, Any], status: int = 200) -> None:
        self.set_status(status)
        self.set_header("Content-Type", "application/json; charset=utf-8")
        self.finish(json.dumps(payload))

    def parse_body(self, model: Type[ModelT], message: str) -> ModelT:
        """Validate the JSON body against ``model``; any failure is a 400 with ``message``."""
        if len(self.request.body) > MAX_JSON_BODY_BYTES:
            raise ApiError(413, "request body too large")
        try:
            payload = json.loads(self.request.body or b"null")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ApiError(400, message)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise ApiError(400, message, detail=exc.errors(include_url=False, include_context=False))

    def write_error(self, status_code: int, **kwargs):
        exc = kwargs.get("exc_info", (None, None, None))[1]
        if isinstance(exc, ApiError):
            payload = exc.payload
        elif isinstance(exc, tornado.web.HTTPError):
            payload = {"error": exc.log_message or self._reason}
        else:
            payload = {"error": "internal server error"}
        self.set_header("Content-Type", "application/json; charset=utf-8")
        self.finish(json.dumps(payload, default=str))
