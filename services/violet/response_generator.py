"""Turn a user utterance plus catalog context into Violet's reply.

Each call walks the same pipeline: check for an admin trigger, pick the
prompt for the session mode, window the transcript, then call the
generation backend. Backend absence and backend failures both end in a
fixed reply, so `generate_response` never raises.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from models.session_models import ADMIN_MODE, SENDER_ADMIN, SENDER_USER, ChatMessage
from services.violet.admin_trigger import ADMIN_TRIGGER_CODES, is_admin_trigger
from services.violet.backend import GenerationBackend
from services.violet.context_assembler import BusinessContext
from services.violet.prompts import build_system_prompt

ADMIN_ACTIVATION_MESSAGE = (
    "🔐 Admin mode activated! Hello admin, I'm Violet, your Shop&Glow management assistant. "
    "I can help you with:\n\n"
    "• Website analytics and performance insights\n"
    "• Product and inventory management\n"
    "• Partner relationship monitoring\n"
    "• Customer behavior analysis\n"
    "• Error detection and troubleshooting\n"
    "• Business optimization recommendations\n\n"
    "How can I assist you with managing Shop&Glow today?"
)

CUSTOMER_OFFLINE_MESSAGE = (
    "Hi! I'm Violet, your Shop&Glow assistant. AI chat features are currently offline, but you can "
    "browse our premium beauty products, mother care items, and pet grooming supplies. "
    "Use the navigation menu to explore our curated collections!"
)

ADMIN_OFFLINE_MESSAGE = (
    "Admin mode is available, but AI features require an OpenAI API key. You can still access all "
    "Shop&Glow management features through the interface."
)

EMPTY_REPLY_MESSAGE = "I'm having trouble responding right now. Please try again."

TECHNICAL_DIFFICULTIES_MESSAGE = "I'm experiencing technical difficulties. Please try again in a moment."


@dataclass(frozen=True)
class GenerationResult:
    message: str
    should_enter_admin_mode: bool = False


def assemble_history(transcript: Sequence[ChatMessage], new_text: str, window: int = 6) -> List[Dict[str, str]]:
    """Map the last `window` messages to backend roles and append the new user turn."""
    recent = list(transcript)[-window:] if window > 0 else []
    history = [
        {
            "role": "user" if msg.sender in (SENDER_USER, SENDER_ADMIN) else "assistant",
            "content": msg.content,
        }
        for msg in recent
    ]
    history.append({"role": "user", "content": new_text})
    return history


class ResponseGenerator:
    """Produce Violet's reply for one inbound message."""

    def __init__(
        self,
        backend: GenerationBackend,
        *,
        history_window: int = 6,
        timeout: float = 30.0,
        trigger_codes: Iterable[str] = ADMIN_TRIGGER_CODES,
    ) -> None:
        if backend is None:
            raise ValueError("A generation backend is required; use UnavailableBackend when none is configured.")
        self.backend = backend
        self.history_window = history_window
        self.timeout = timeout
        self.trigger_codes = tuple(trigger_codes)

    async def generate_response(
        self,
        text: str,
        mode: str,
        context: BusinessContext,
        history: Sequence[ChatMessage] = (),
    ) -> GenerationResult:
        """Return the reply text and whether this exchange activates admin mode.

        Args:
            text: The new user message.
            mode: Current session mode (`customer` or `admin`).
            context: Catalog snapshot assembled for this turn.
            history: Session transcript before `text`, oldest first.
        """
        if mode != ADMIN_MODE and is_admin_trigger(text, self.trigger_codes):
            return GenerationResult(message=ADMIN_ACTIVATION_MESSAGE, should_enter_admin_mode=True)

        system_prompt = build_system_prompt(mode, context)
        turns = assemble_history(history, text, self.history_window)

        if not self.backend.available:
            logging.info("Generation backend unavailable; returning static %s reply", mode)
            message = ADMIN_OFFLINE_MESSAGE if mode == ADMIN_MODE else CUSTOMER_OFFLINE_MESSAGE
            return GenerationResult(message=message)

        start = time.time()
        try:
            reply = await asyncio.wait_for(self.backend.generate(system_prompt, turns), timeout=self.timeout)
        except asyncio.TimeoutError:
            logging.error("Generation backend timed out after %.1fs", self.timeout)
            return GenerationResult(message=TECHNICAL_DIFFICULTIES_MESSAGE)
        except Exception as exc:
            logging.error("Generation backend error: %s", exc)
            return GenerationResult(message=TECHNICAL_DIFFICULTIES_MESSAGE)

        logging.info(f"Violet response latency: {time.time() - start:.3f}s")
        return GenerationResult(message=reply or EMPTY_REPLY_MESSAGE)
