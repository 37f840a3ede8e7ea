"""
Guestbook Web — FastAPI Application Factory
============================================

What:  Serves the guestbook page.
How:   GET / loads the list and renders it. POST / receives the form and
       submits it. On success it redirects to GET / (303) so a browser
       refresh does not post the message again. On failure it renders the
       error banner with the form kept.
Who:   uvicorn (`uvicorn guestbook_web.main:app --port 3000`) and the tests.

Lifecycle:
    Startup:  logging
    Shutdown: close the shared httpx client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from guestbook_web import __version__
from guestbook_web.api_client import GuestbookClient
from guestbook_web.config import WebSettings, settings as default_settings
from guestbook_web.page import GuestbookPage

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """Same stdout format as the API so both processes' logs line up."""
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: WebSettings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Guestbook Web %s using API at %s", __version__, app_settings.api_url)

    yield

    await app.state.client.aclose()
    logger.info("Shutdown complete.")


def get_page(request: Request) -> GuestbookPage:
    return GuestbookPage(request.app.state.client, tz=request.app.state.settings.display_tz)


def create_app(
    app_settings: Optional[WebSettings] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create the web client application.

    Args:
        app_settings: Settings to build from; defaults to the environment.
        http:         httpx client to use instead of one built from API_URL.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(title="Guestbook Web", version=__version__, lifespan=lifespan)
    app.state.settings = app_settings
    app.state.client = (
        GuestbookClient(http) if http is not None
        else GuestbookClient.for_base_url(app_settings.api_url)
    )

    @app.get("/", response_class=HTMLResponse)
    async def show_page(request: Request) -> HTMLResponse:
        page = get_page(request)
        await page.load()
        return HTMLResponse(page.render())

    @app.post("/", response_class=HTMLResponse)
    async def submit_message(
        request: Request,
        name: str = Form(default=""),
        message: str = Form(default=""),
    ):
        page = get_page(request)
        page.set_field("name", name)
        page.set_field("message", message)
        if await page.submit():
            return RedirectResponse("/", status_code=303)
        # The submit error outranks any error from reloading the list
        submit_error = page.error
        await page.load()
        page.error = submit_error
        return HTMLResponse(page.render())

    return app


app = create_app()
