"""Generation backend contract used by Violet's generator and intent classifier."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol


class BackendError(RuntimeError):
    """Raised by a backend when a generation request fails for any reason."""


class GenerationBackend(Protocol):
    """Text-generation capability.

    `history` entries are `{"role": "user" | "assistant", "content": str}`
    dicts in conversation order; the new user turn is already appended.
    """

    available: bool

    async def generate(self, system_prompt: str, history: List[Dict[str, str]]) -> str:
        ...

    async def generate_structured(
        self,
        system_prompt: str,
        text: str,
        function: Dict[str, Any],
    ) -> Dict[str, Any]:
        ...


class UnavailableBackend:
    """Backend used when no credential is configured.

    Callers check `available` first; calling it anyway is a programming error.
    """

    available = False

    async def generate(self, system_prompt: str, history: List[Dict[str, str]]) -> str:
        raise BackendError("No generation backend is configured.")

    async def generate_structured(
        self,
        system_prompt: str,
        text: str,
        function: Dict[str, Any],
    ) -> Dict[str, Any]:
        raise BackendError("No generation backend is configured.")
