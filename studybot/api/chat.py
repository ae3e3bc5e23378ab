"""
Chat API endpoints - Send messages and read a session's history.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status

from ..core import ChatService
from ..models import ChatRequest, ChatResponse, HistoryResponse
from ..storage import SessionStore
from .deps import get_chat_service, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Send a chat message and get the AI response.

    The session is created on its first message. Both the user message and
    the reply are stored once the reply has been generated.

    Args:
        request: Session id (optional) and message text
        chat_service: Chat orchestrator

    Returns:
        ChatResponse with the reply text and a timestamp
    """
    if not request.message or not request.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is required"
        )

    try:
        reply = await chat_service.send_message(request.session_id, request.message)
    except Exception as e:
        logger.error(f"Error processing chat for session {request.session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate response: {str(e)}"
        )

    return ChatResponse(response=reply.response, timestamp=reply.timestamp)


@router.get("/history/{session_id}", response_model=HistoryResponse)
async def get_chat_history(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """
    Get all messages of a session, oldest first.
    Unknown sessions have an empty history.
    """
    try:
        session = await store.get_session(session_id)
    except Exception as e:
        logger.error(f"Error fetching history for session {session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch history"
        )

    if session is None:
        return HistoryResponse(messages=[])
    return HistoryResponse(messages=session.messages)
