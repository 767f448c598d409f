"""Schema definitions for the customer intent classification tool."""

from typing import Any, Dict

INTENTS = ["product_search", "support", "purchase_help", "general_inquiry"]

FUNCTION_NAME = "classify_customer_intent"

FUNCTION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": FUNCTION_NAME,
    "description": "Return the customer's intent, the entities mentioned, and a confidence score.",
    "parameters": {
        "type": "object",
        "properties": {
            "intent": {
                "type": "string",
                "description": "The single best-matching intent.",
                "enum": INTENTS,
            },
            "entities": {
                "type": "array",
                "description": "Keywords or product names extracted from the message.",
                "items": {"type": "string"},
            },
            "confidence": {
                "type": "number",
                "description": "Confidence in the chosen intent, between 0 and 1.",
            },
        },
        "required": ["intent", "entities", "confidence"],
        "additionalProperties": False,
    },
    "strict": True,
}
