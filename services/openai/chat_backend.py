"""Generation backend built on the OpenAI Responses API."""

import logging
from typing import Any, Dict, List

from openai import AsyncOpenAI

from services.openai.response_parser import extract_text, extract_usage, parse_function_call
from services.violet.backend import BackendError


class OpenAIChatBackend:
    """Send Violet's prompts to OpenAI and hand back plain text or tool arguments."""

    available = True

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = "gpt-4o",
        max_output_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> None:
        if client is None:
            raise ValueError("OpenAI AsyncOpenAI client is required.")
        self.client = client
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, history: List[Dict[str, str]]) -> str:
        """Return the model's reply to the conversation.

        Args:
            system_prompt: Mode-specific instructions.
            history: Prior turns plus the new user message, oldest first.

        Raises:
            BackendError: On any API or transport failure.
        """
        inputs = [{"type": "message", "role": "system", "content": system_prompt}]
        inputs.extend({"type": "message", "role": turn["role"], "content": turn["content"]} for turn in history)
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=inputs,
                max_output_tokens=self.max_output_tokens,
                temperature=self.temperature,
            )
        except Exception as exc:
            logging.error("OpenAI Responses API error: %s", exc)
            raise BackendError(str(exc)) from exc

        usage = extract_usage(response)
        logging.info("Violet generation usage: %s input / %s output tokens", usage["input_tokens"], usage["output_tokens"])
        return extract_text(response).strip()

    async def generate_structured(
        self,
        system_prompt: str,
        text: str,
        function: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Force a call to `function` and return its decoded arguments.

        Raises:
            BackendError: On API failure or when the tool call is missing or unparsable.
        """
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=[
                    {"type": "message", "role": "system", "content": system_prompt},
                    {"type": "message", "role": "user", "content": text},
                ],
                tools=[function],
                tool_choice={"type": "function", "name": function["name"]},
            )
        except Exception as exc:
            logging.error("OpenAI Responses API error: %s", exc)
            raise BackendError(str(exc)) from exc

        try:
            return parse_function_call(response, tool_name=function["name"])
        except Exception as exc:
            logging.error("Error parsing OpenAI response: %s", exc)
            raise BackendError(str(exc)) from exc
