"""Path validation for serving tool files.

Three independent checks guard every tool request:

- ``is_valid_slug``: the tool id is restricted to lowercase letters, digits and hyphens.
- ``is_safe_filename``: only ``index.html`` may be requested, and never a
  traversal sequence or an absolute path.
- ``is_within_root``: the canonicalized target must stay under the canonicalized
  tools root.

The first two exist for clear error messages. ``is_within_root`` is the check
that actually confines file access and is applied unconditionally.
"""

import os
import re
from pathlib import Path
from typing import Union

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
TOOL_ENTRY_FILE = "index.html"

PathLike = Union[str, "os.PathLike[str]"]


class ToolPathError(Exception):
    """A tool request that must be refused with the given HTTP status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def is_valid_slug(slug: str) -> bool:
    return bool(slug) and SLUG_PATTERN.fullmatch(slug) is not None


def is_safe_filename(filename: str) -> bool:
    """True only for the tool entry file, rejecting traversal and absolute forms."""
    if ".." in filename or filename.startswith(("/", "\\")) or os.path.isabs(filename):
        return False
    return filename == TOOL_ENTRY_FILE


def is_within_root(path: PathLike, root: PathLike) -> bool:
    """Canonical prefix check: ``path`` resolves to ``root`` or something beneath it."""
    resolved = os.path.realpath(path)
    resolved_root = os.path.realpath(root)
    if resolved == resolved_root:
        return True
    # Compare against "root/" so that a sibling such as "tools-evil" is not accepted for "tools"
    prefix = resolved_root if resolved_root.endswith(os.sep) else resolved_root + os.sep
    return resolved.startswith(prefix)


def resolve_tool_file(tools_dir: PathLike, slug: str, filename: str = "") -> Path:
    """Return the canonical path of a servable tool file or raise ``ToolPathError``."""
    if not is_valid_slug(slug):
        raise ToolPathError(400, "Invalid tool id")

    requested = filename or TOOL_ENTRY_FILE
    if not is_safe_filename(requested):
        raise ToolPathError(400, "Invalid path")

    resolved = Path(os.path.realpath(Path(tools_dir) / slug / requested))
    if not is_within_root(resolved, tools_dir):
        raise ToolPathError(403, "Forbidden")

    if not resolved.is_file():
        raise ToolPathError(404, "Not found")
    return resolved
