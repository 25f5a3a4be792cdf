"""FastAPI HTTP server for the color frame.

Routes:

    ANY /        -> frame page (HTML); write-style requests may carry a
                    frame action payload whose buttonIndex selects a color
    ANY /image   -> JPEG filled with the current color
    GET /health  -> {"status": "ok", "strategy": ..., "color": "#rrggbb"}

Frame action payload (only ``buttonIndex`` has an effect)::

    {"untrustedData": {"fid": 1, "url": "...", "messageHash": "0x...",
                       "timestamp": 1706655303000, "network": 1,
                       "buttonIndex": 3,
                       "castId": {"fid": 1, "hash": "0x..."}},
     "trustedData": {"messageBytes": "..."}}
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from pydantic import BaseModel, ValidationError

from framecolor.config.settings import Settings
from framecolor.domain.models import FrameActionPayload, PageContext, Palette
from framecolor.state import ColorStore, create_color_store
from framecolor.utils.imaging import ImageEncodeError, render_color_jpeg

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
# Only these methods may carry a frame action payload
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})


class PayloadError(ValueError):
    """Raised when a request body is not a valid frame action payload."""


class HealthResponse(BaseModel):
    status: str = "ok"
    strategy: str = "shared"
    color: str = "#ffffff"


def parse_payload(body: bytes) -> FrameActionPayload | None:
    """Decode a frame action body. An empty body means no payload."""
    if not body.strip():
        return None
    try:
        return FrameActionPayload.model_validate_json(body.decode("utf-8"))
    except (UnicodeDecodeError, ValidationError) as e:
        raise PayloadError(str(e)) from e


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    settings: Settings | None = None,
    store: ColorStore | None = None,
    palette: Palette | None = None,
    templates: Jinja2Templates | None = None,
) -> FastAPI:
    """Create the frame server application.

    Args:
        settings: Server configuration. Defaults to Settings().
        store: Optional pre-built color store (for testing). Built from
               settings.state.strategy when omitted.
        palette: Optional palette override. Built from settings.palette
                 when omitted.
        templates: Optional template loader. Defaults to the bundled
                   templates or settings.server.template_dir.
    """
    if settings is None:
        settings = Settings()
    if palette is None:
        palette = settings.palette.build_palette()
    if store is None:
        store = create_color_store(
            settings.state.strategy,
            default=settings.palette.build_default_color(),
            max_casts=settings.state.max_casts,
        )
    if templates is None:
        templates = Jinja2Templates(directory=str(settings.server.template_dir or TEMPLATE_DIR))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        s: ColorStore = app.state.store
        logger.info(
            "Frame server started (strategy=%s, palette=%d colors, default=%s)",
            s.strategy, len(app.state.palette), s.default.hex,
        )
        yield
        logger.info("Frame server stopped")

    app = FastAPI(
        title="framecolor",
        description="Interactive frame that renders a button-selected background color",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.palette = palette
    app.state.templates = templates

    @app.get("/health")
    async def health_check() -> HealthResponse:
        s: ColorStore = app.state.store
        return HealthResponse(status="ok", strategy=s.strategy, color=s.get().hex)

    @app.api_route("/", methods=ALL_METHODS, response_class=HTMLResponse)
    async def frame_page(request: Request) -> HTMLResponse:
        s: ColorStore = app.state.store
        p: Palette = app.state.palette
        logger.info("Received request: %s %s", request.method, request.url.path)

        image_key = None
        if request.method in WRITE_METHODS:
            body = await request.body()
            try:
                payload = parse_payload(body)
            except PayloadError as e:
                logger.warning("Error decoding frame action payload: %s", e)
                raise HTTPException(status_code=400, detail="Bad Request") from e

            if payload is not None:
                logger.debug("Frame action received: %s", payload.untrustedData)
                image_key = s.key_for(payload)
                color = p.lookup(payload.selector)
                if color is not None:
                    logger.info("Setting color %d", payload.selector)
                    s.apply(payload, color)
                else:
                    logger.debug("Ignoring out-of-range selector %d", payload.selector)

            for key, value in request.query_params.multi_items():
                logger.debug("Query parameter: %s = %s", key, value)

        cfg: Settings = app.state.settings
        context = PageContext(
            image_key=image_key,
            post_url=str(request.base_url),
            width=cfg.image.width,
            height=cfg.image.height,
        )
        t: Jinja2Templates = app.state.templates
        try:
            html = t.get_template(cfg.server.template_name).render(**context.template_context())
        except TemplateError as e:
            logger.error("Error rendering %s: %s", cfg.server.template_name, e)
            raise HTTPException(status_code=500, detail="Internal Server Error") from e

        logger.info("Served %s with UUID %s", cfg.server.template_name, context.uuid)
        return HTMLResponse(content=html)

    # Sync handler: FastAPI runs it in the threadpool so encoding does
    # not block the event loop.
    @app.api_route("/image", methods=ALL_METHODS)
    def frame_image(key: str | None = None) -> Response:
        s: ColorStore = app.state.store
        cfg: Settings = app.state.settings
        color = s.get(key)
        try:
            data = render_color_jpeg(
                color,
                width=cfg.image.width,
                height=cfg.image.height,
                quality=cfg.image.quality,
            )
        except ImageEncodeError as e:
            logger.error("Error encoding image: %s", e)
            raise HTTPException(status_code=500, detail="Internal Server Error") from e
        logger.info("Served image (%s)", color.hex)
        return Response(content=data, media_type="image/jpeg")

    return app


# ---------------------------------------------------------------------------
# Standalone entry point
# ---------------------------------------------------------------------------

def main(config_path: Path | str | None = None) -> None:
    """Run the frame server with YAML/env configuration and logging set up."""
    from framecolor.config.settings import load_settings
    from framecolor.utils.logging import setup_logging

    settings = load_settings(config_path)
    setup_logging(settings.logging)
    app = create_app(settings)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
