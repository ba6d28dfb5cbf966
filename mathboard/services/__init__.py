"""Service layer: Gemini, relay rooms and the upload object store."""
