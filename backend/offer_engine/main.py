"""
TME Offer Engine API
Thin FastAPI adapter over the cost and service derivation engine.
"""
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from offer_engine.api.quote_routes import router as quote_router
from offer_engine.services.authority_registry import authority_names
from offer_engine.services.logging_config import setup_logging
from offer_engine.services.middleware import RequestTimingMiddleware
from offer_engine.services.quote_builder import InvalidDocumentDataError

load_dotenv()

_log_level = os.getenv("LOG_LEVEL", "INFO")
_json_logs = os.getenv("LOG_FORMAT", "json").lower() != "text"
setup_logging(level=_log_level, json_output=_json_logs)
logger = logging.getLogger("tme-offers")

VERSION = "1.0.0"

app = FastAPI(
    title="TME Offer Engine API",
    version=VERSION,
    description="Itemized cost proposals and compliance letters for UAE company setup, visas and tax services",
)

# ---------------------------------------------------------------------------
# CORS: allowed origins from env
# ---------------------------------------------------------------------------
_cors_default = "http://localhost:3000,http://localhost:8000"
cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
)
# Outermost
app.add_middleware(RequestTimingMiddleware)

app.include_router(quote_router)


@app.exception_handler(InvalidDocumentDataError)
async def invalid_document_handler(request: Request, exc: InvalidDocumentDataError):
    logger.warning(
        f"Rejected request: {exc}",
        extra={"request_id": getattr(request.state, "request_id", None)},
    )
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": VERSION,
        "authorities": authority_names(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("offer_engine.main:app", host="0.0.0.0", port=8000, reload=True)
