"""Session creation and intent helpers behind the chat HTTP routes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException, Request

from services.realtime.session_store import SessionStore
from services.violet.intent_classifier import IntentClassifier


async def start_session(request: Request) -> Dict[str, Any]:
	"""Issue a new chat session id for the websocket join."""
	store: SessionStore = request.app.state.session_store
	issued = store.create()
	return {
		"sessionId": issued.session_id,
		"isAdminMode": False,
		"createdAt": datetime.fromtimestamp(issued.created_at, tz=timezone.utc).isoformat(),
	}


async def analyze_intent(request: Request, message: str) -> Dict[str, Any]:
	"""Classify a customer message; the classifier itself never fails."""
	if not message or not message.strip():
		raise HTTPException(status_code=400, detail="Message text is required.")
	classifier: IntentClassifier = request.app.state.intent_classifier
	result = await classifier.classify(message.strip())
	return result.model_dump()
