import logging
import uuid
from typing import List, Optional, Union

import tornado.websocket

from mathboard.handlers.base import origin_allowed
from mathboard.models import HandshakeParams, Role, encode_event
from mathboard.models.messages import CONTROL_EVENTS, decode_event_name
from mathboard.services.relay_service import RelayService


logger = logging.getLogger(__name__)

SUBPROTOCOL = "classlink.v1"


def _log_failed_delivery(future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.debug("Relay delivery dropped: %s", exc)


class ClassLinkWebSocketHandler(tornado.websocket.WebSocketHandler):
    """
    Desktop/mobile relay. Both sides connect with ``?role=...&sid=...`` and
    every relay event one of them sends is forwarded to the others in the room.
    """

    def initialize(self, relay: RelayService, allowed_origins: List[str]):
        self.relay = relay
        self.allowed_origins = allowed_origins
        self.connection_id: Optional[str] = None
        self.params: Optional[HandshakeParams] = None

    def check_origin(self, origin: str) -> bool:
        return origin_allowed(origin, self.allowed_origins)

    def select_subprotocol(self, subprotocols: List[str]) -> Optional[str]:
        return SUBPROTOCOL if SUBPROTOCOL in subprotocols else None

    def open(self):
        self.connection_id = uuid.uuid4().hex
        self.params = HandshakeParams.from_query(
            role=self.get_argument("role", default=None),
            sid=self.get_argument("sid", default=None),
            connection_id=self.connection_id,
        )
        self.relay.join(self, self.params.room)
        kind = "Mobile" if self.params.role is Role.MOBILE else "Desktop"
        logger.info("%s connected: %s", kind, self.params.label)

    def on_message(self, message: Union[str, bytes]):
        if isinstance(message, bytes):
            # Binary messages are raw frame blobs.
            self.relay.broadcast(self, message, binary=True)
            return

        event = decode_event_name(message)
        if event is None:
            logger.debug("Ignoring non-relay message from %s", self.connection_id)
            return
        if event in CONTROL_EVENTS:
            self.relay.broadcast(self, encode_event(event))
        else:
            self.relay.broadcast(self, message)

    def deliver(self, message: Union[str, bytes], binary: bool = False) -> None:
        try:
            future = self.write_message(message, binary=binary)
        except tornado.websocket.WebSocketClosedError:
            logger.debug("Relay delivery to closed connection %s skipped", self.connection_id)
            return
        future.add_done_callback(_log_failed_delivery)

    def on_close(self):
        self.relay.leave(self)
        label = self.params.label if self.params else self.connection_id
        logger.info("Disconnect: %s (code=%s reason=%s)", label, self.close_code, self.close_reason)
