"""FastAPI routes for chat sessions and intent analysis."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.chat_controller import analyze_intent, start_session

router = APIRouter(prefix="/api/chat")


class IntentPayload(BaseModel):
	message: str


@router.post("/session")
async def start_session_route(request: Request):
	try:
		return await start_session(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/intent")
async def analyze_intent_route(request: Request, payload: IntentPayload):
	try:
		return await analyze_intent(request, payload.message)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))
