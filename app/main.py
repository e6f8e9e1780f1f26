"""FastAPI application entrypoint."""
import logging
import sys
from pathlib import Path

# Project root (parent of app/)
_ROOT = Path(__file__).resolve().parent.parent

# Load .env FIRST so NVIDIA_*, BUSINESS_PROFILES_PATH, etc. are set before any app code reads them.
from dotenv import load_dotenv
load_dotenv(_ROOT / ".env")

# Ensure project root is on path when run as: python app/main.py
if __name__ == "__main__" or "app" not in sys.modules:
    if str(_ROOT) not in sys.path:
        sys.path.insert(0, str(_ROOT))

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import router
from app.core.agent import ChatOrchestrator, build_llm
from app.core.config import Settings, get_settings
from app.core.profiles import load_profiles
from app.core.sessions import SessionStore

logging.basicConfig(level=getattr(logging, get_settings().log_level, logging.INFO))
_log = logging.getLogger(__name__)

# Prevent third-party HTTP libs from logging at DEBUG (avoids leaking API keys/headers into logs)
for _name in ("httpx", "httpcore", "hpack", "urllib3"):
    logging.getLogger(_name).setLevel(logging.WARNING)


def build_orchestrator(settings: Settings) -> ChatOrchestrator:
    """Wire profiles, sessions and the completion client. Raises ConfigError on bad config."""
    profiles = load_profiles(settings.business_profiles_path)
    llm = build_llm(settings)
    return ChatOrchestrator(
        profiles=profiles,
        sessions=SessionStore(),
        llm=llm,
        timeout_seconds=settings.completion_timeout_seconds,
    )


def create_app(orchestrator: Optional[ChatOrchestrator] = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ConfigError propagates here, so the server never starts serving with bad config.
        if getattr(app.state, "orchestrator", None) is None:
            app.state.orchestrator = build_orchestrator(settings)
        _log.info("Environment: %s", settings.app_env)
        _log.info("Completion model: %s", settings.nvidia_model)
        _log.info("NVIDIA API key: %s", "set" if settings.nvidia_api_key else "not set")
        yield

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "OPTIONS", "GET"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=True)
