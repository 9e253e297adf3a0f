"""Minimal static backend for TinyTools.

Serves the pre-generated manifest and each tool's index.html. Nothing submitted
by a client is executed; tools run inside an iframe sandbox in the frontend.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from starlette.applications import Starlette
from starlette.datastructures import MutableHeaders
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import FileResponse
from starlette.responses import JSONResponse
from starlette.responses import PlainTextResponse
from starlette.responses import RedirectResponse
from starlette.responses import Response
from starlette.routing import Mount
from starlette.routing import Route
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp
from starlette.types import Message
from starlette.types import Receive
from starlette.types import Scope
from starlette.types import Send

from tinytools.config import Settings
from tinytools.config import load_settings
from tinytools.logging_config import setup_logging
from tinytools.path_safety import ToolPathError
from tinytools.path_safety import is_valid_slug
from tinytools.path_safety import resolve_tool_file

setup_logging(load_settings().log_level)

logger = logging.getLogger(__name__)

MANIFEST_MISSING = "Manifest not found. Run: tinytools-manifest"
FRONTEND_MISSING = "Frontend not built. Run: cd frontend && npm run build"

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline'",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src 'self' https://fonts.gstatic.com",
        "frame-src 'self'",
        "img-src 'self' data:",
        "connect-src 'self'",
    ]
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}


class SecurityHeadersMiddleware:
    """Attach the fixed security headers to every HTTP response."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in SECURITY_HEADERS.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)


class SPAStaticFiles(StaticFiles):
    """Static mount for the frontend build that falls back to its index.html.

    Unknown paths get the bundle entry so client-side routing can take over.
    """

    async def check_config(self) -> None:
        # The build may not exist yet; requests then get the "not built" 404.
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404:
                raise

        index = Path(self.directory) / "index.html"
        if index.is_file():
            return FileResponse(index)
        return PlainTextResponse(FRONTEND_MISSING, status_code=404)


def create_app(settings: Optional[Settings] = None) -> Starlette:
    """Build the ASGI app for the given directory layout."""
    settings = settings or load_settings()
    tools_dir = settings.tools_dir
    manifest_path = settings.manifest_path

    async def get_manifest(request: Request) -> Response:
        # Served straight from disk on every request so a regenerated manifest is picked up immediately
        if not manifest_path.is_file():
            logger.warning(f"Manifest requested but {manifest_path} does not exist")
            return JSONResponse({"error": MANIFEST_MISSING}, status_code=404)
        return FileResponse(manifest_path, media_type="application/json")

    def serve_tool_file(slug: str, filename: str = "") -> Response:
        try:
            path = resolve_tool_file(tools_dir, slug, filename)
        except ToolPathError as e:
            if e.status_code == 403:
                logger.warning(f"Refused tool path outside root: slug={slug!r} file={filename!r}")
            return PlainTextResponse(e.message, status_code=e.status_code)
        return FileResponse(path)

    async def get_tool_index(request: Request) -> Response:
        return serve_tool_file(request.path_params["slug"], "index.html")

    async def get_tool_dir(request: Request) -> Response:
        return serve_tool_file(request.path_params["slug"])

    async def redirect_tool(request: Request) -> Response:
        slug = request.path_params["slug"]
        if not is_valid_slug(slug):
            return PlainTextResponse("Invalid tool id", status_code=400)
        # Trailing slash keeps relative asset URLs inside the tool's HTML resolving under /tools/<slug>/
        return RedirectResponse(f"/tools/{slug}/", status_code=302)

    async def health(request: Request) -> Response:
        return JSONResponse({"status": "ok"})

    routes = [
        Route("/tools-manifest.json", get_manifest, methods=["GET"]),
        Route("/tools/{slug}/index.html", get_tool_index, methods=["GET"]),
        Route("/tools/{slug}/", get_tool_dir, methods=["GET"]),
        Route("/tools/{slug}", redirect_tool, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Mount("/", app=SPAStaticFiles(directory=settings.dist_dir, check_dir=False), name="frontend"),
    ]
    return Starlette(routes=routes, middleware=[Middleware(SecurityHeadersMiddleware)])


app = create_app()


def main() -> None:
    import uvicorn

    settings = load_settings()
    logger.info(f"TinyTools server http://localhost:{settings.port}")
    uvicorn.run("tinytools.web:app", host=settings.host, port=settings.port)


# For direct script execution
if __name__ == "__main__":
    main()
