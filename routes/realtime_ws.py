"""WebSocket endpoint for realtime chat with Violet."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.realtime.session_store import SessionStore
from services.realtime.ws_session import RealtimeSessionHandler

router = APIRouter()


def _require_session_store(websocket: WebSocket) -> SessionStore:
	store = getattr(websocket.app.state, "session_store", None)
	if store is None:
		raise HTTPException(status_code=500, detail="Session store unavailable")
	return store


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket, store: SessionStore = Depends(_require_session_store)):
	"""Relay join and message events for one browser connection."""
	await websocket.accept()
	handler = RealtimeSessionHandler(
		store,
		websocket.app.state.response_generator,
		websocket.app.state.context_assembler,
	)
	try:
		while True:
			try:
				raw = await websocket.receive_text()
			except WebSocketDisconnect:
				break
			except KeyError:
				# Binary frames carry no "text" key.
				await websocket.send_text(json.dumps({"type": "error", "message": "Invalid websocket frame"}))
				continue
			try:
				payload = json.loads(raw)
			except ValueError:
				await websocket.send_text(json.dumps({"type": "error", "message": "Payload must be JSON"}))
				continue
			try:
				await handler.handle(websocket, payload)
			except WebSocketDisconnect:
				break
	finally:
		handler.close()
