"""
VOYAGE ESTIMATOR API
====================

This module defines the FastAPI application and its HTTP endpoints. The
server is a thin relay: the chat client sends the whole conversation, the
server adds the voyage estimator system prompt and forwards it to the
completion API, then returns the assistant's reply.

ENDPOINTS:
  GET  /          - Returns API name and list of endpoints.
  GET  /health    - Returns whether the relay is initialized and has an API key.
  POST /api/chat  - Relay a conversation; returns {"message": {...}} or {"error": "..."}.

STARTUP:
  On startup, the lifespan function builds one RelayService from configuration
  (API key included). On shutdown, it closes the service's HTTP session.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from voyage_estimator.config import HOST, LOG_LEVEL, OPENAI_API_KEY, PORT
from voyage_estimator.models import ChatRequest, ChatResponse, ErrorResponse
from voyage_estimator.services.errors import RelayError
from voyage_estimator.services.relay_service import RelayService


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("VoyageEstimator")


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCE
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by the route handlers.
relay_service: RelayService = None


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the RelayService once at startup with the configured API key, and
    close its HTTP session at shutdown. A missing key does not stop the
    server: every chat request then fails fast with a configuration error.
    """
    global relay_service

    logger.info("=" * 60)
    logger.info("Voyage Estimator - Starting Up...")
    logger.info("=" * 60)

    relay_service = RelayService(api_key=OPENAI_API_KEY)
    if relay_service.is_configured:
        logger.info("Relay service ready (model=%s)", relay_service.model)
    else:
        logger.warning("OPENAI_API_KEY not set. Chat requests will fail until it is configured.")

    yield

    logger.info("Shutting down Voyage Estimator...")
    relay_service.close()
    relay_service = None


# -------------------------------------------------------------------------
# FASTAPI APP AND CORS
# -------------------------------------------------------------------------
app = FastAPI(
    title="Voyage Estimator API",
    description="Chat relay for commercial voyage cost estimates",
    lifespan=lifespan
)

# Allow any origin so a frontend on another port can call this API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================================================
# ERROR HANDLERS
# =========================================================================
# Every failure on /api/chat is returned as {"error": "..."}.

@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request body: %s", exc.errors())
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request body.").model_dump(),
    )


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint."""
    return {
        "message": "Voyage Estimator API",
        "endpoints": {
            "/api/chat": "Relay a conversation to the voyage estimator model",
            "/health": "System health check"
        }
    }


@app.get("/health")
async def health():
    """Return 'healthy' plus whether the relay exists and has a usable API key."""
    return {
        "status": "healthy",
        "relay_service": relay_service is not None,
        "api_key_configured": relay_service is not None and relay_service.is_configured,
    }


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def chat(request: ChatRequest):
    """
    Relay a conversation to the completion API.

    Runs as a plain (sync) handler so the blocking upstream call happens in
    FastAPI's threadpool instead of on the event loop.

    REQUEST BODY:
    {
        "messages": [
            {"role": "user", "content": "50,000 MT grain Santos to Qingdao at $45/MT"}
        ]
    }

    RESPONSE:
    {
        "message": {"role": "assistant", "content": "**Voyage estimate** ..."}
    }
    """
    if relay_service is None:
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Relay service not initialized").model_dump(),
        )

    try:
        message = relay_service.get_response(request.messages)
    except RelayError:
        raise
    except Exception as e:
        logger.error("Chat API error: %s", e, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )
    return ChatResponse(message=message)


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m voyage_estimator.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server; installed as the voyage-estimator-server command."""
    uvicorn.run(
        "voyage_estimator.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower()
    )

if __name__ == "__main__":
    run()
