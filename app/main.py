"""FastAPI application for the twenty questions prize game."""

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import ValidationError
from datetime import datetime
from typing import Optional
import logging
import uuid

from app.config import config
from app.minting import SyndicateClient
from app.models import ChatRequest
from app.session_store import SessionStore, mask_session_id
from app.game.words import make_word_provider
from app.services.turn_service import TurnService
from app import analytics

# Configure logging FIRST (before any logging calls)
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO), format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-ID"

# Initialize FastAPI app
app = FastAPI(
    title="Twenty Questions Prize Game",
    description="Guess the secret word in twenty yes-or-no questions and win an NFT",
    version="1.0.0"
)

# Process-lifetime game state and collaborators
session_store = SessionStore()
minting_client = SyndicateClient()
turn_service = TurnService(
    store=session_store,
    minting_client=minting_client,
    word_provider=make_word_provider()
)


def _resolve_session_id(request: Request, body_session_id: Optional[str]) -> str:
    """Header first, then body; a new token when the caller has none."""
    for candidate in (request.headers.get(SESSION_HEADER), body_session_id):
        if candidate and candidate.strip():
            return candidate.strip()
    session_id = uuid.uuid4().hex
    logger.info(f"🆕 Issued session token {mask_session_id(session_id)}")
    return session_id


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Twenty Questions Prize Game API",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    minting_configured = bool(config.SYNDICATE_API_KEY and config.SYNDICATE_PROJECT_ID)

    return {
        "status": "healthy" if minting_configured else "degraded",
        "timestamp": datetime.now().isoformat(),
        "services": {
            "minting": "configured" if minting_configured else "not configured",
            "model": "configured" if config.GROQ_API_KEY else "not configured",
            "active_sessions": len(session_store)
        }
    }


@app.post("/api/chat")
async def chat(request: Request):
    """
    Play one turn of the game.

    Body: {
        "messages": [{"role": "user", "content": "Is it alive?"}, ...],
        "sessionId": "optional token, also accepted as X-Session-ID header"
    }

    Replies with plain text (fixed messages, prize outcome) or a streamed
    model answer. The session token is echoed in the X-Session-ID header.
    """
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Request body must be JSON")

    try:
        chat_request = ChatRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Malformed chat request: {e.error_count()} errors")
        raise HTTPException(
            status_code=400,
            detail="Malformed chat request: 'messages' must be a non-empty list of {role, content} turns"
        )

    session_id = _resolve_session_id(request, chat_request.session_id)
    headers = {SESSION_HEADER: session_id}

    try:
        result = await turn_service.handle_turn(session_id, chat_request.messages)
    except Exception as e:
        logger.exception(f"❌ Chat turn failed for {mask_session_id(session_id)}: {e}")
        raise HTTPException(status_code=500, detail="Game error, please try again")

    if result.text is not None:
        return PlainTextResponse(content=result.text, headers=headers)

    return StreamingResponse(result.stream, media_type="text/plain; charset=utf-8", headers=headers)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Starting Twenty Questions Prize Game API")

    # Validate configuration
    try:
        config.validate()
        logger.info("Configuration validated successfully")
    except ValueError as e:
        logger.error(f"Configuration validation failed: {e}")

    # Initialize PostHog analytics
    try:
        analytics.init_posthog(
            api_key=config.POSTHOG_API_KEY,
            host=config.POSTHOG_HOST
        )
    except Exception as e:
        logger.error(f"PostHog initialization failed: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Shutting down Twenty Questions Prize Game API")
    analytics.shutdown()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
