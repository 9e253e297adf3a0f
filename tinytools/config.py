"""Project configuration and paths."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 3000

# Project structure
PROJECT_ROOT = Path(os.getenv("TINYTOOLS_ROOT", Path(__file__).resolve().parent.parent))
TOOLS_DIR = Path(os.getenv("TINYTOOLS_TOOLS_DIR", PROJECT_ROOT / "tools"))
MANIFEST_PATH = Path(os.getenv("TINYTOOLS_MANIFEST", PROJECT_ROOT / "tools-manifest.json"))
DIST_DIR = Path(os.getenv("TINYTOOLS_DIST_DIR", PROJECT_ROOT / "frontend" / "dist"))


def parse_port(value) -> int:
    """Return a usable port number, falling back to the default."""
    try:
        port = int(str(value).strip())
    except (TypeError, ValueError):
        return DEFAULT_PORT
    return port if port > 0 else DEFAULT_PORT


@dataclass(frozen=True)
class Settings:
    tools_dir: Path = TOOLS_DIR
    manifest_path: Path = MANIFEST_PATH
    dist_dir: Path = DIST_DIR
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read server settings from the environment."""
    return Settings(
        host=os.getenv("HOST", "0.0.0.0"),
        port=parse_port(os.getenv("PORT")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
