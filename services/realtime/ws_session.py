"""Dispatch realtime websocket events for one chat connection."""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect

from models.chat_events import (
	ConnectedEvent,
	ErrorEvent,
	JoinedEvent,
	JoinEvent,
	MessageEvent,
	OutboundEvent,
	dump_event,
	parse_inbound_event,
)
from services.realtime.session_store import SessionBusyError, SessionStore
from services.realtime.ws_chat import ChatMessageHandler
from services.violet.context_assembler import ContextAssembler
from services.violet.response_generator import ResponseGenerator

PENDING = "pending"
JOINED = "joined"
CLOSED = "closed"


class RealtimeSessionHandler:
	"""Route websocket events for a single connection.

	The connection moves PENDING -> JOINED on a valid join and to CLOSED when
	the socket goes away. It only remembers the joined session id; the
	transcript and mode live in the SessionStore.
	"""

	def __init__(self, store: SessionStore, generator: ResponseGenerator, assembler: ContextAssembler) -> None:
		self.store = store
		self.chat_handler = ChatMessageHandler(store, generator, assembler)
		self.state = PENDING
		self.session_id: Optional[str] = None

	async def handle(self, websocket: WebSocket, payload: Any) -> None:
		"""Process a single decoded inbound payload."""
		try:
			event = parse_inbound_event(payload)
		except ValidationError:
			await self._send(websocket, ErrorEvent(message="Unsupported or malformed event."))
			return
		try:
			if isinstance(event, JoinEvent):
				await self._join(websocket, event)
			elif isinstance(event, MessageEvent):
				await self._message(websocket, event)
			else:
				raise ValueError("Unsupported message type.")
		except WebSocketDisconnect:
			raise
		except Exception as exc:
			logging.warning("Realtime event %s failed: %s", getattr(event, "type", "?"), exc)
			await self._send(websocket, ErrorEvent(message=str(exc)))

	async def _join(self, websocket: WebSocket, event: JoinEvent) -> None:
		if self.state == JOINED:
			raise RuntimeError("Connection already joined a session.")
		try:
			self.store.join(event.session_id)
		except KeyError:
			await self._send(websocket, ErrorEvent(message="Session not found"))
			return
		except SessionBusyError as exc:
			await self._send(websocket, ErrorEvent(message=str(exc)))
			return
		self.state = JOINED
		self.session_id = event.session_id
		logging.info("Websocket joined session %s", event.session_id)
		await self._send(websocket, JoinedEvent(session_id=event.session_id))
		await self._send(websocket, ConnectedEvent())

	async def _message(self, websocket: WebSocket, event: MessageEvent) -> None:
		if self.state != JOINED or self.session_id is None:
			raise RuntimeError("Join a session before sending messages.")
		for outbound in await self.chat_handler.reply(self.session_id, event.content):
			await self._send(websocket, outbound)

	def close(self) -> None:
		"""Release the session; its transcript is not kept."""
		if self.session_id is not None:
			self.store.discard(self.session_id)
			logging.info("Websocket closed; discarded session %s", self.session_id)
		self.state = CLOSED
		self.session_id = None

	async def _send(self, websocket: WebSocket, event: OutboundEvent) -> None:
		await websocket.send_text(json.dumps(dump_event(event)))
