# config.py
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Directory holding the music_server package; relative MUSIC_DIR values resolve from here.
APP_DIR = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 8292
DEFAULT_MUSIC_DIR = "./music"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    music_dir: Path
    chunk_size: int = 64 * 1024
    idle_timeout: int = 15
    log_level: str = "INFO"


def resolve_music_dir(raw: str, base: Path = APP_DIR) -> Path:
    return (base / os.path.expanduser(raw)).resolve()


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from `env`, or from os.environ after reading a .env file."""
    if env is None:
        load_dotenv()
        env = os.environ
    return Settings(
        host=env.get("HOST", "0.0.0.0"),
        port=int(env.get("PORT", str(DEFAULT_PORT))),
        music_dir=resolve_music_dir(env.get("MUSIC_DIR", DEFAULT_MUSIC_DIR)),
        chunk_size=int(env.get("CHUNK_SIZE", str(64 * 1024))),
        idle_timeout=int(env.get("IDLE_TIMEOUT", "15")),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )
