import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .core.config import get_settings
from .routers import terms
from .schemas.envelope import Envelope
from .terms_service import MISSING_PARAMS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Build the settings up front so a bad configuration fails at startup,
    # honouring any override installed for the request dependency
    settings = app.dependency_overrides.get(get_settings, get_settings)()
    logging.getLogger().setLevel(settings.LOG_LEVEL.upper())

    logger.info(
        f"Starting terms relay service for contract {settings.CONTRACT_ADDRESS} "
        f"on network {settings.NETWORK_ID} via {settings.GATEWAY_URL}"
    )
    yield
    logger.info("Shutting down terms relay service...")


app = FastAPI(
    title="Terms Relay",
    description="Relays terms-of-service signatures to and from the terms contract",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Unparsable input is answered with the same envelope as a missing field
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=200, content=Envelope.failure(MISSING_PARAMS).to_body())


app.include_router(terms.router, tags=["terms"])


@app.get("/test")
def test_endpoint():
    """Simple health-like endpoint used by the shell runner and docker compose."""
    return {
        "service": "terms-relay",
        "status": "ok",
        "message": "hello from terms relay",
    }
