"""Typed realtime events exchanged over the chat websocket."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class JoinEvent(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	type: Literal["join"]
	session_id: str = Field(alias="sessionId", min_length=1)


class MessageEvent(BaseModel):
	type: Literal["message"]
	content: str


InboundEvent = Annotated[Union[JoinEvent, MessageEvent], Field(discriminator="type")]

inbound_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_inbound_event(payload: Any) -> Union[JoinEvent, MessageEvent]:
	"""Validate a decoded JSON payload; raises pydantic.ValidationError when malformed."""
	return inbound_event_adapter.validate_python(payload)


class ConnectedEvent(BaseModel):
	type: Literal["connected"] = "connected"


class JoinedEvent(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	type: Literal["joined"] = "joined"
	session_id: str = Field(alias="sessionId")


class ChatMessageEvent(BaseModel):
	type: Literal["message"] = "message"
	message: Dict[str, Any]


class AdminModeActivatedEvent(BaseModel):
	type: Literal["admin_mode_activated"] = "admin_mode_activated"


class ErrorEvent(BaseModel):
	type: Literal["error"] = "error"
	message: str


OutboundEvent = Union[ConnectedEvent, JoinedEvent, ChatMessageEvent, AdminModeActivatedEvent, ErrorEvent]


def dump_event(event: OutboundEvent) -> Dict[str, Any]:
	"""Return the JSON-ready dict for an outbound event, using wire aliases."""
	return event.model_dump(by_alias=True)
