"""Shared fixtures for TinyTools tests."""

import json
import os
import tempfile

# Keep log files out of the working tree (must happen before tinytools imports)
os.environ.setdefault("TINYTOOLS_LOG_DIR", tempfile.mkdtemp(prefix="tinytools-logs-"))

import pytest  # noqa: E402

from tinytools.logging_config import setup_logging  # noqa: E402

# Configure handlers once against the session-wide stdout, not a CliRunner stream
setup_logging("DEBUG")


def make_tool(tools_dir, slug, meta=None, index=True, raw_meta=None):
    """Create a tool folder with an optional index.html and meta.json."""
    tool_dir = tools_dir / slug
    tool_dir.mkdir(parents=True, exist_ok=True)
    if index:
        (tool_dir / "index.html").write_text(f"<!doctype html><title>{slug}</title>", encoding="utf-8")
    if raw_meta is not None:
        (tool_dir / "meta.json").write_text(raw_meta, encoding="utf-8")
    elif meta is not None:
        (tool_dir / "meta.json").write_text(json.dumps(meta), encoding="utf-8")
    return tool_dir


@pytest.fixture
def tools_dir(tmp_path):
    path = tmp_path / "tools"
    path.mkdir()
    return path
