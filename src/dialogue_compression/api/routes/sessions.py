"""
Routes API pour la gestion des sessions et de leur compression.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.constants import SUMMARY_PREVIEW_LENGTH
from ...core.exceptions import SessionNotFoundError, SummarizationError
from ...services.conversation import ConversationService

router = APIRouter()


def _get_conversations(request: Request) -> ConversationService:
    return request.app.state.conversations


def _not_found(session_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "Session non trouvée", "session_id": session_id}
    )


@router.post("/session/create")
async def api_create_session(request: Request):
    """Crée une nouvelle session de conversation."""
    conversations = _get_conversations(request)
    session_id = conversations.create_session()

    return {
        "success": True,
        "session_id": session_id,
        "config": conversations.engine.config.to_dict()
    }


@router.get("/session/{session_id}")
async def api_get_session(session_id: str, request: Request):
    """Détail d'une session (stats, événements de compression)."""
    try:
        session = _get_conversations(request).describe(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)

    return {"success": True, "session": session}


@router.post("/session/{session_id}/toggle-compression")
async def api_toggle_compression(session_id: str, request: Request):
    """Active/désactive la compression pour une session."""
    try:
        enabled = _get_conversations(request).toggle_compression(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)

    return {"success": True, "use_compression": enabled}


@router.get("/session/{session_id}/history")
async def api_get_history(session_id: str, request: Request, compressed: bool = False):
    """Historique complet ou compressé d'une session."""
    conversations = _get_conversations(request)
    try:
        history = conversations.history_view(
            session_id, "compressed" if compressed else "full"
        )
        session = conversations.store.get(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)

    return {
        "success": True,
        "history": history,
        "summaries": [summary.to_dict() for summary in session.summaries],
        "message_count": len(session.messages),
        "compression_events": [event.to_dict() for event in session.compression_events],
        "stats": session.stats.to_dict()
    }


@router.get("/session/{session_id}/compare")
async def api_compare_views(session_id: str, request: Request):
    """Compare la vue complète et la vue compressée."""
    conversations = _get_conversations(request)
    try:
        report = conversations.compare_views(session_id)
        session = conversations.store.get(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)

    comparison = report.to_dict()
    comparison["stats"] = session.stats.to_dict()

    return {
        "success": True,
        "comparison": comparison,
        "compression_events": [event.to_dict() for event in session.compression_events],
        "summaries": [
            {
                "content": summary.content[:SUMMARY_PREVIEW_LENGTH] + "...",
                "original_message_count": summary.original_message_count,
                "compressed_at": summary.compressed_at
            }
            for summary in session.summaries
        ]
    }


@router.post("/session/{session_id}/compress")
async def api_compress_session(session_id: str, request: Request):
    """Force une compression immédiate, quel que soit le seuil."""
    try:
        outcome = await _get_conversations(request).compress(session_id)
    except SessionNotFoundError:
        return _not_found(session_id)
    except SummarizationError as e:
        return JSONResponse(
            status_code=502,
            content={
                "success": False,
                "error": e.message,
                "code": e.code,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )

    return {"success": True, **outcome.to_dict()}


@router.delete("/session/{session_id}")
async def api_delete_session(session_id: str, request: Request):
    """Supprime une session."""
    deleted = _get_conversations(request).delete_session(session_id)
    if not deleted:
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": "Session non trouvée"}
        )
    return {"success": True, "message": "Session supprimée"}


@router.get("/sessions")
async def api_list_sessions(request: Request):
    """Liste toutes les sessions actives."""
    sessions = _get_conversations(request).list_sessions()
    return {
        "success": True,
        "sessions": sessions,
        "total_sessions": len(sessions)
    }
