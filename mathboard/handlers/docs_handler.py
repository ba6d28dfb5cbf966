from mathboard.handlers.base import JsonHandler
from mathboard.models import (
    ChatRequest,
    CreateFolderRequest,
    FramePayload,
    RelayEnvelope,
    SchemaDocument,
    Sketch,
    SketchRequest,
    TextStroke,
    UploadRecord,
)


class DocsHandler(JsonHandler):
    def get(self):
        schema = SchemaDocument(
            websocket_endpoints={
                "classlink": "/ws/classlink?role=desktop|mobile&sid=<session id>",
            },
            websocket_events={
                "envelope": RelayEnvelope.model_json_schema(),
                "start": {"direction": "desktop -> room", "data": None},
                "stop": {"direction": "desktop -> room", "data": None},
                "frame": FramePayload.model_json_schema(),
                "status": {"direction": "any -> room", "data": "any JSON value"},
            },
            http_endpoints={
                "GET /health": "liveness probe",
                "POST /api/chat": "tutor reply as {reply}",
                "POST /api/chat/stream": "tutor reply as chunked text/plain",
                "POST /api/sketch": "whiteboard JSON as {sketch}",
                "GET /api/uploads": "list uploads, optional ?folder=",
                "POST /api/uploads": "multipart upload: file, folder",
                "DELETE /api/uploads/<key>": "delete one upload",
                "GET /api/folders": "list folders",
                "POST /api/folders": "create folder {name}",
                "DELETE /api/folders/<name>": "delete folder and its uploads",
            },
            request_schemas={
                "ChatRequest": ChatRequest.model_json_schema(),
                "SketchRequest": SketchRequest.model_json_schema(),
                "Sketch": Sketch.model_json_schema(),
                "TextStroke": TextStroke.model_json_schema(),
                "CreateFolderRequest": CreateFolderRequest.model_json_schema(),
                "UploadRecord": UploadRecord.model_json_schema(),
            },
            examples={
                "frame": {"event": "frame", "data": {"seq": 1, "ts": 1000, "data": "<base64 jpeg>"}},
                "start": {"event": "start"},
                "chat_request": {"messages": [{"role": "user", "content": "Was ist Zinseszins?"}]},
            },
            notes=[
                "All WebSocket text messages are JSON envelopes {event, data}.",
                "Events are forwarded unchanged to every other connection in the same sid room.",
                "Without sid a connection gets a private room and nobody receives its events.",
                "Binary WebSocket messages are forwarded as opaque frame blobs.",
                "Preferred sub-protocol: classlink.v1.",
            ],
        )
        self.write_json(schema.model_dump(mode="json"))
