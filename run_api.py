#!/usr/bin/env python3
"""Run the relay server. Usage: python run_api.py. Set HOST=0.0.0.0 to allow network access, PORT to change port (default 3001)."""
from pathlib import Path

# Project root = directory containing this file. Load .env first so env vars are set
# before uvicorn (and the reload worker) start.
_ROOT = Path(__file__).resolve().parent
_env_path = _ROOT / ".env"
from dotenv import load_dotenv
load_dotenv(_env_path)

import uvicorn

from app.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.app_env.lower() in {"dev", "development", "local"},
    )
