import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lesson_proxy.config import require_api_key, settings
from lesson_proxy.errors import InvalidRequest
from lesson_proxy.routers import generate, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    require_api_key()
    logger.info("Server socket timeout set to %d seconds.", settings.socket_timeout_seconds)
    yield


app = FastAPI(title="Lesson Plan Generator", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    """Unparseable or mistyped bodies get the same 400 shape as a missing prompt."""
    logger.info("Rejected malformed request body on %s", request.url.path)
    return JSONResponse(
        {"error": generate.MISSING_PROMPT_MESSAGE},
        status_code=InvalidRequest.status_code,
    )


app.include_router(health.router)
app.include_router(generate.router)


def run() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
    )
    logger.info("Server listening on port %d", settings.port)
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        timeout_keep_alive=settings.socket_timeout_seconds,
    )


if __name__ == "__main__":
    run()
