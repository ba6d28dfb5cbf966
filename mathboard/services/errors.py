class GenerationError(Exception):
    """The language-model call failed."""


class MissingApiKeyError(GenerationError):
    def __init__(self):
        super().__init__("GEMINI_API_KEY is not configured")


class SketchOutputError(GenerationError):
    """The model answered, but not with a usable sketch. Keeps the raw text."""

    code = "sketch_output_error"
    message = "sketch output unusable"

    def __init__(self, raw: str):
        super().__init__(self.message)
        self.raw = raw


class SketchParseError(SketchOutputError):
    code = "sketch_parse_error"
    message = "sketch JSON could not be parsed"


class SketchFormatError(SketchOutputError):
    code = "sketch_invalid_format"
    message = "invalid sketch format"
