"""
Session API endpoints - List, rename and delete chat sessions.
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, status

from ..models import (
    RenameRequest, SessionListResponse, SessionSummary, SuccessResponse,
    default_session_name,
)
from ..storage import SessionStore
from .deps import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=SessionListResponse)
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """
    List sessions, most recently created first.
    Sessions without a name get one derived from their id.
    """
    try:
        sessions = await store.list_sessions()
    except Exception as e:
        logger.error(f"Error listing sessions: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch sessions"
        )

    return SessionListResponse(sessions=[
        SessionSummary(id=s.session_id, name=s.session_name or default_session_name(s.session_id))
        for s in sessions
    ])


@router.put("/{session_id}/rename", response_model=SuccessResponse)
async def rename_session(
    session_id: str,
    request: RenameRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Rename a session. Renaming an unknown session is a no-op."""
    if not request.name or not request.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required"
        )

    try:
        renamed = await store.rename_session(session_id, request.name)
    except Exception as e:
        logger.error(f"Error renaming session {session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to rename session"
        )

    if not renamed:
        logger.info(f"Rename ignored for unknown session {session_id}")
    return SuccessResponse(success=True)


@router.delete("/{session_id}", response_model=SuccessResponse)
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """Delete a session and all of its messages."""
    try:
        await store.delete_session(session_id)
    except Exception as e:
        logger.error(f"Error deleting session {session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete session"
        )

    return SuccessResponse(success=True)
