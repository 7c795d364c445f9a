# config.py
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# ─── Which .env to load ─────────────────────────────────────────────────────────
root = Path(__file__).resolve().parent.parent.parent

ENV_FILES = {
    "prod": ".env.production",
    "dev": ".env.development",
}


def load_env(env: str = "prod") -> Path:
    """Loads .env.production or .env.development from the repo root."""
    env_file = root / ENV_FILES[env]
    load_dotenv(env_file)
    return env_file


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read at call time so a later load_env() is always picked up."""
    return os.getenv(name, default)
