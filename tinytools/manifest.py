"""Scan the tools directory and generate tools-manifest.json."""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime
from datetime import timezone
from pathlib import Path
from typing import Iterable
from typing import List
from typing import Optional

import click
from pydantic import ValidationError

from tinytools.config import MANIFEST_PATH
from tinytools.config import TOOLS_DIR
from tinytools.config import load_settings
from tinytools.logging_config import setup_logging
from tinytools.logging_utils import run_summary
from tinytools.models import DEFAULT_CATEGORY
from tinytools.models import DEFAULT_ORDER
from tinytools.models import Manifest
from tinytools.models import ToolDescriptor
from tinytools.models import ToolMeta
from tinytools.path_safety import TOOL_ENTRY_FILE
from tinytools.path_safety import is_valid_slug

logger = logging.getLogger(__name__)

CATEGORY_ORDER = ["Text", "Encoding", "Web", "Hashing", "Other"]
META_FILE = "meta.json"


def list_tool_dirs(tools_dir: Path) -> List[str]:
    """Names of the non-hidden immediate subdirectories of the tools root.

    Symlinks are not followed, so a link pointing elsewhere never becomes a tool.
    """
    if not tools_dir.is_dir():
        logger.info(f"Tools directory {tools_dir} not found, no tools to list")
        return []
    with os.scandir(tools_dir) as entries:
        return sorted(
            entry.name for entry in entries if entry.is_dir(follow_symlinks=False) and not entry.name.startswith(".")
        )


def read_meta(tool_dir: Path) -> Optional[ToolMeta]:
    """Load meta.json for a tool.

    A missing, unparsable or non-object document is treated as absent. Individual
    fields of the wrong type are dropped by ``ToolMeta`` and fall back to defaults.
    """
    meta_path = tool_dir / META_FILE
    if not meta_path.is_file():
        return None
    try:
        return ToolMeta.model_validate(json.loads(meta_path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring unreadable metadata in {meta_path}: {e.__class__.__name__}")
        return None


def slug_to_name(slug: str) -> str:
    """'unicode-search' -> 'Unicode Search'."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), slug.replace("-", " "))


def build_descriptor(tools_dir: Path, slug: str) -> Optional[ToolDescriptor]:
    """Describe one tool directory, or None when it has no entry file."""
    tool_dir = tools_dir / slug
    if not (tool_dir / TOOL_ENTRY_FILE).is_file():
        logger.debug(f"Skipping {slug}: no {TOOL_ENTRY_FILE}")
        return None
    if not is_valid_slug(slug):
        logger.warning(f"Tool directory {slug!r} is not a valid slug; the server will refuse to serve it")

    meta = read_meta(tool_dir) or ToolMeta()
    return ToolDescriptor(
        id=slug,
        path=f"tools/{slug}/",
        name=meta.name or slug_to_name(slug),
        category=meta.category or DEFAULT_CATEGORY,
        description=meta.description or "",
        keywords=meta.keywords or [],
        order=meta.order if meta.order is not None else DEFAULT_ORDER,
        icon=meta.icon or "",
    )


def category_rank(category: str) -> int:
    try:
        return CATEGORY_ORDER.index(category)
    except ValueError:
        return len(CATEGORY_ORDER)


def sort_tools(tools: Iterable[ToolDescriptor]) -> List[ToolDescriptor]:
    """Order by category priority, then explicit order, then name."""
    return sorted(tools, key=lambda t: (category_rank(t.category), t.order, t.name.casefold(), t.name))


def ordered_categories(tools: Iterable[ToolDescriptor]) -> List[str]:
    """Distinct categories in priority order; unknown ones last, alphabetically."""
    return sorted({t.category for t in tools}, key=lambda c: (category_rank(c), c))


def build_manifest(tools_dir: Path, now: Optional[datetime] = None) -> Manifest:
    """Scan ``tools_dir`` and return the sorted catalog."""
    tools = []
    for slug in list_tool_dirs(tools_dir):
        descriptor = build_descriptor(tools_dir, slug)
        if descriptor is not None:
            tools.append(descriptor)

    tools = sort_tools(tools)
    generated_at = (now or datetime.now(timezone.utc)).isoformat().replace("+00:00", "Z")
    return Manifest(generated_at=generated_at, categories=ordered_categories(tools), tools=tools)


def write_manifest(manifest: Manifest, path: Path) -> None:
    """Write the manifest as formatted JSON, replacing any previous file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest.to_document(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def generate_manifest(tools_dir: Path = TOOLS_DIR, manifest_path: Path = MANIFEST_PATH) -> Manifest:
    """Build the manifest from ``tools_dir`` and write it to ``manifest_path``."""
    with run_summary("manifest") as summary:
        manifest = build_manifest(tools_dir)
        write_manifest(manifest, manifest_path)
        summary.add_attribute("output", manifest_path)
        summary.add_metric("tools", len(manifest.tools))
        summary.add_metric("categories", len(manifest.categories))
    logger.info(f"Generated {manifest_path} with {len(manifest.tools)} tools.")
    return manifest


@click.command()
@click.option(
    "--tools-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=TOOLS_DIR,
    show_default=True,
    help="Directory containing one folder per tool.",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=MANIFEST_PATH,
    show_default=True,
    help="Where to write the manifest.",
)
@click.option("--dry-run", is_flag=True, help="Print the manifest instead of writing it.")
def main(tools_dir: Path, output: Path, dry_run: bool) -> None:
    """Scan the tools directory and regenerate tools-manifest.json."""
    setup_logging(load_settings().log_level)
    if dry_run:
        manifest = build_manifest(tools_dir)
        click.echo(json.dumps(manifest.to_document(), indent=2, ensure_ascii=False))
        logger.info(f"Dry run: {len(manifest.tools)} tools found, nothing written.")
        return
    generate_manifest(tools_dir, output)


if __name__ == "__main__":
    main()
