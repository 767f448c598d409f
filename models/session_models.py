"""Session domain models for realtime chat."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

CUSTOMER_MODE = "customer"
ADMIN_MODE = "admin"

SENDER_USER = "user"
SENDER_VIOLET = "violet"
SENDER_ADMIN = "admin"


@dataclass(frozen=True)
class ChatMessage:
	"""A single immutable chat line in a session transcript."""

	session_id: str
	sender: str
	content: str
	message_type: str = "text"
	metadata: Optional[Dict[str, Any]] = None
	id: str = field(default_factory=lambda: uuid4().hex)
	created_at: float = field(default_factory=lambda: time.time())

	def to_wire(self) -> Dict[str, Any]:
		"""Return the camelCase JSON shape the browser client renders."""
		return {
			"id": self.id,
			"sessionId": self.session_id,
			"sender": self.sender,
			"content": self.content,
			"messageType": self.message_type,
			"metadata": self.metadata,
			"createdAt": datetime.fromtimestamp(self.created_at, tz=timezone.utc).isoformat(),
		}


@dataclass
class IssuedSession:
	"""A session id handed out by the session-creation endpoint."""

	session_id: str
	created_at: float = field(default_factory=lambda: time.time())


@dataclass
class ChatSession:
	"""In-memory conversation state for one joined session."""

	session_id: str
	mode: str = CUSTOMER_MODE
	messages: List[ChatMessage] = field(default_factory=list)
	connected: bool = False
	created_at: float = field(default_factory=lambda: time.time())

	@property
	def is_admin(self) -> bool:
		return self.mode == ADMIN_MODE
