"""Copy tools/ and tools-manifest.json into the frontend build for static-only hosting.

Run after building the frontend (``cd frontend && npm run build``).
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

import click

from tinytools.config import DIST_DIR
from tinytools.config import MANIFEST_PATH
from tinytools.config import TOOLS_DIR
from tinytools.config import load_settings
from tinytools.logging_config import setup_logging
from tinytools.logging_utils import run_summary

logger = logging.getLogger(__name__)

BUILD_HINT = "Run frontend build first: cd frontend && npm run build"


class DistNotBuiltError(Exception):
    """The frontend build output directory does not exist."""


@dataclass(frozen=True)
class CopyResult:
    tools_copied: bool
    manifest_copied: bool


def copy_tree(src: Path, dest: Path) -> bool:
    """Recursively copy ``src`` into ``dest``, overwriting existing files.

    Returns False without touching ``dest`` when ``src`` does not exist.
    """
    if not src.exists():
        return False
    shutil.copytree(src, dest, dirs_exist_ok=True)
    return True


def copy_tools_to_dist(
    tools_dir: Path = TOOLS_DIR,
    manifest_path: Path = MANIFEST_PATH,
    dist_dir: Path = DIST_DIR,
) -> CopyResult:
    if not dist_dir.is_dir():
        raise DistNotBuiltError(BUILD_HINT)

    with run_summary("deploy") as summary:
        tools_copied = copy_tree(tools_dir, dist_dir / "tools")
        if tools_copied:
            logger.info(f"Copied {tools_dir} to {dist_dir / 'tools'}")
        else:
            logger.info(f"No tools directory at {tools_dir}, skipping")

        manifest_copied = False
        if manifest_path.is_file():
            shutil.copyfile(manifest_path, dist_dir / "tools-manifest.json")
            manifest_copied = True
            logger.info(f"Copied {manifest_path.name} to {dist_dir}")
        else:
            logger.info(f"No manifest at {manifest_path}, skipping")

        summary.add_attribute("dist_dir", dist_dir)
        summary.add_metric("tools_copied", tools_copied)
        summary.add_metric("manifest_copied", manifest_copied)

    return CopyResult(tools_copied=tools_copied, manifest_copied=manifest_copied)


@click.command()
@click.option("--tools-dir", type=click.Path(file_okay=False, path_type=Path), default=TOOLS_DIR, show_default=True)
@click.option("--manifest", type=click.Path(dir_okay=False, path_type=Path), default=MANIFEST_PATH, show_default=True)
@click.option(
    "--dist-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DIST_DIR,
    show_default=True,
    help="Frontend build output directory.",
)
def main(tools_dir: Path, manifest: Path, dist_dir: Path) -> None:
    """Copy tools and the manifest into the frontend build output."""
    setup_logging(load_settings().log_level)
    try:
        copy_tools_to_dist(tools_dir, manifest, dist_dir)
    except DistNotBuiltError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
