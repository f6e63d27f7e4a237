"""
Route API pour un tour de chat.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ...core.exceptions import SessionNotFoundError, ProviderError

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_text(value) -> bool:
    return isinstance(value, str) and bool(value)


@router.post("/chat")
async def api_chat(request: Request):
    """
    Envoie un message dans une conversation.

    Body: {"session_id": str, "message": str, "use_compression": bool (optionnel)}
    """
    try:
        data = await request.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        return JSONResponse(status_code=400, content={"error": "Body JSON invalide"})

    session_id = data.get("session_id")
    message = data.get("message")
    use_compression = data.get("use_compression")

    if not _is_text(session_id) or not _is_text(message):
        return JSONResponse(
            status_code=400,
            content={"error": "session_id et message (texte non vide) sont requis"}
        )
    if not isinstance(use_compression, bool):
        use_compression = None

    chat = request.app.state.chat
    try:
        result = await chat.send_message(session_id, message, use_compression=use_compression)
    except SessionNotFoundError:
        return JSONResponse(
            status_code=404,
            content={"error": "Session non trouvée", "session_id": session_id}
        )
    except ProviderError as e:
        logger.error("❌ [CHAT] Erreur provider: %s", e)
        return JSONResponse(
            status_code=502,
            content={
                "error": "Impossible d'obtenir une réponse de l'IA",
                "details": e.message,
                "code": e.code
            }
        )

    return result.to_dict()
