"""Handle chat message events coming over the realtime websocket."""
from __future__ import annotations

import logging
from typing import List

from models.chat_events import AdminModeActivatedEvent, ChatMessageEvent, OutboundEvent
from models.session_models import ADMIN_MODE, SENDER_ADMIN, SENDER_USER, SENDER_VIOLET, ChatMessage
from services.realtime.session_store import SessionStore
from services.violet.context_assembler import ContextAssembler, describe_context
from services.violet.response_generator import ResponseGenerator


class ChatMessageHandler:
	"""Record a user message, generate Violet's reply and record it too."""

	def __init__(self, store: SessionStore, generator: ResponseGenerator, assembler: ContextAssembler) -> None:
		self.store = store
		self.generator = generator
		self.assembler = assembler

	async def reply(self, session_id: str, content: str) -> List[OutboundEvent]:
		"""Return the events to push back for one inbound message, in emit order."""
		text = (content or "").strip()
		if not text:
			raise ValueError("Message content is required.")

		# Hold the session lock only while touching the transcript and mode.
		async with self.store.lock(session_id):
			mode, history = self.store.snapshot(session_id)
			sender = SENDER_ADMIN if mode == ADMIN_MODE else SENDER_USER
			self.store.add_message(session_id, ChatMessage(session_id=session_id, sender=sender, content=text))

		context = await self.assembler.assemble(mode)
		logging.debug("Assembled %s context for %s: %s", mode, session_id, describe_context(context))
		result = await self.generator.generate_response(text, mode, context, history)

		events: List[OutboundEvent] = []
		async with self.store.lock(session_id):
			reply = ChatMessage(session_id=session_id, sender=SENDER_VIOLET, content=result.message)
			self.store.add_message(session_id, reply)
			if result.should_enter_admin_mode and self.store.enter_admin_mode(session_id):
				events.append(AdminModeActivatedEvent())
		events.append(ChatMessageEvent(message=reply.to_wire()))
		return events
