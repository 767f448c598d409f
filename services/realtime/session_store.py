"""Simple in-memory store for realtime chat sessions."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from models.session_models import ADMIN_MODE, ChatMessage, ChatSession, IssuedSession


class SessionBusyError(RuntimeError):
	"""Raised when a second connection tries to join a session that already has one."""


class SessionStore:
	"""Issue session ids and own the per-session transcript and mode.

	Connections only hold a session id. Transcript and mode mutations go
	through the per-session lock returned by `lock()`.
	"""

	def __init__(self, unjoined_ttl: float = 600.0) -> None:
		self.unjoined_ttl = unjoined_ttl
		self._issued: Dict[str, IssuedSession] = {}
		self._sessions: Dict[str, ChatSession] = {}
		self._locks: Dict[str, asyncio.Lock] = {}

	def create(self) -> IssuedSession:
		"""Issue a new session id that a websocket may later join."""
		self.sweep_unjoined()
		issued = IssuedSession(session_id=uuid4().hex)
		self._issued[issued.session_id] = issued
		return issued

	def sweep_unjoined(self, now: Optional[float] = None) -> int:
		"""Retire issued ids nobody joined within `unjoined_ttl` seconds."""
		now = time.time() if now is None else now
		expired = [
			session_id
			for session_id, issued in self._issued.items()
			if session_id not in self._sessions and now - issued.created_at > self.unjoined_ttl
		]
		for session_id in expired:
			del self._issued[session_id]
		if expired:
			logging.info("Retired %d unjoined session ids", len(expired))
		return len(expired)

	def is_issued(self, session_id: str) -> bool:
		return session_id in self._issued

	def join(self, session_id: str) -> ChatSession:
		"""Attach a live connection to an issued session, creating its state on first join.

		Raises KeyError for ids that were never issued (or already retired) and
		SessionBusyError when another connection already holds the session.
		"""
		if session_id not in self._issued:
			raise KeyError(f"Session {session_id} not found")
		state = self._sessions.get(session_id)
		if state is None:
			state = ChatSession(session_id=session_id)
			self._sessions[session_id] = state
			self._locks[session_id] = asyncio.Lock()
		if state.connected:
			raise SessionBusyError(f"Session {session_id} already has an active connection")
		state.connected = True
		return state

	def get(self, session_id: str) -> ChatSession:
		"""Return a joined session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	def lock(self, session_id: str) -> asyncio.Lock:
		self.get(session_id)
		return self._locks[session_id]

	def add_message(self, session_id: str, message: ChatMessage) -> ChatSession:
		"""Append a message to the session transcript."""
		state = self.get(session_id)
		state.messages.append(message)
		return state

	def snapshot(self, session_id: str) -> Tuple[str, List[ChatMessage]]:
		"""Return the current mode and a copy of the transcript."""
		state = self.get(session_id)
		return state.mode, list(state.messages)

	def enter_admin_mode(self, session_id: str) -> bool:
		"""Flip the session to admin mode. Returns False if it already was."""
		state = self.get(session_id)
		if state.is_admin:
			return False
		state.mode = ADMIN_MODE
		logging.info("Session %s entered admin mode", session_id)
		return True

	def discard(self, session_id: str) -> None:
		"""Drop the transcript and retire the id once its connection closes."""
		self._sessions.pop(session_id, None)
		self._locks.pop(session_id, None)
		self._issued.pop(session_id, None)

	def __len__(self) -> int:
		return len(self._sessions)
