"""Classify a customer message into one of Violet's four intents."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Literal

from pydantic import BaseModel, Field, ValidationError

from services.openai.intent_schema import FUNCTION_DEFINITION
from services.violet.backend import GenerationBackend
from services.violet.prompts import intent_system_prompt

Intent = Literal["product_search", "support", "purchase_help", "general_inquiry"]


class IntentResult(BaseModel):
    intent: Intent
    entities: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0.0, le=1.0)


DEFAULT_INTENT = IntentResult(intent="general_inquiry", entities=[], confidence=0.5)


class IntentClassifier:
    """Ask the backend for a structured intent, falling back to a neutral default."""

    def __init__(self, backend: GenerationBackend, *, timeout: float = 30.0) -> None:
        if backend is None:
            raise ValueError("A generation backend is required; use UnavailableBackend when none is configured.")
        self.backend = backend
        self.timeout = timeout

    async def classify(self, text: str) -> IntentResult:
        if not self.backend.available:
            return DEFAULT_INTENT.model_copy(deep=True)
        try:
            args = await asyncio.wait_for(
                self.backend.generate_structured(intent_system_prompt(), text, FUNCTION_DEFINITION),
                timeout=self.timeout,
            )
            return IntentResult.model_validate(args)
        except asyncio.TimeoutError:
            logging.error("Intent classification timed out after %.1fs", self.timeout)
        except ValidationError as exc:
            logging.error("Malformed intent classification output: %s", exc)
        except Exception as exc:
            logging.error("Intent analysis error: %s", exc)
        return DEFAULT_INTENT.model_copy(deep=True)
