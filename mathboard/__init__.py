"""
Mathboard tutoring backend package.

This service is responsible for:
- Proxying tutor chat (blocking and streamed) to the Gemini API.
- Generating whiteboard sketch JSON and checking its shape.
- Storing uploads and folders for the whiteboard.
- Relaying start/stop/frame/status events between desktop and mobile clients
  that share a session id.

The HTTP/WebSocket server is implemented with Tornado.
"""
