import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from .config import Settings
from .gemini_client import GeminiClient
from .handler import handle_generate_commit
from .logging_config import configure_logging
from .models import ErrorOutput

logger = logging.getLogger(__name__)

CLIENT_CLOSED_REQUEST = 499

API_INFO = """Git Diff to Commit Message API

POST /generate-commit
{
  "diff": "your git diff content",
  "gemini_api_key": "optional - if not provided, uses environment variable GEMINI_API_KEY"
}

GET /health - Health check

GET / (with Accept: text/html) - Web interface
"""

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Git Diff to Commit Message</title>
</head>
<body>
  <h1>Git Diff to Commit Message</h1>
  <form id="commit-form">
    <p><textarea id="diff" rows="20" cols="100" placeholder="Paste your git diff here"></textarea></p>
    <p><input id="key" type="password" placeholder="Gemini API key (optional)"></p>
    <p><button type="submit">Generate</button></p>
  </form>
  <pre id="result"></pre>
  <script>
    document.getElementById("commit-form").addEventListener("submit", async (event) => {
      event.preventDefault();
      const body = {diff: document.getElementById("diff").value};
      const key = document.getElementById("key").value;
      if (key) body.gemini_api_key = key;
      const response = await fetch("/generate-commit", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify(body),
      });
      const data = await response.json();
      document.getElementById("result").textContent = data.commit_message || data.error;
    });
  </script>
</body>
</html>
"""


class ClientDisconnected(Exception):
    pass


async def _wait_for_disconnect(request: Request) -> None:
    # Only called after the body has been read, so the next message is the disconnect.
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def run_until_disconnected(request: Request, coro):
    """
    Runs coro, cancelling it if the client goes away first.

    Raises ClientDisconnected in that case.
    """
    work = asyncio.ensure_future(coro)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (work, watcher):
            if not task.done():
                task.cancel()

    if work in done:
        return work.result()
    raise ClientDisconnected()


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Builds the FastAPI application.

    Settings are read from the environment when not supplied; the HTTP client
    used for Gemini lives for the lifetime of the app. `transport` replaces
    the network transport of that client (tests pass an httpx.MockTransport).
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with httpx.AsyncClient(timeout=settings.request_timeout, transport=transport) as http_client:
            app.state.gemini_client = GeminiClient(http_client, settings)
            logger.info(f"Configured Gemini client: model={settings.model}, base URL={settings.base_url}")
            yield

    app = FastAPI(
        title="Git Commit Message Generator API",
        description=f"Generates commit messages from git diffs using Gemini ({settings.model}).",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.get("/", tags=["Info"])
    async def read_root(request: Request):
        """Serves the web form to browsers and a usage summary to everything else."""
        if "text/html" in request.headers.get("accept", ""):
            return HTMLResponse(INDEX_HTML)
        return PlainTextResponse(API_INFO)

    @app.get("/health", tags=["Health Check"])
    async def health():
        return PlainTextResponse("OK")

    @app.post("/generate-commit", tags=["Commit Generation"])
    async def generate_commit(request: Request):
        """
        Receives {"diff": ..., "gemini_api_key": ...} and returns a generated
        commit message. The body is parsed by the handler so that malformed JSON
        gets the service's own 400 response.
        """
        raw_body = await request.body()
        try:
            return await run_until_disconnected(
                request,
                handle_generate_commit(raw_body, request.app.state.settings, request.app.state.gemini_client),
            )
        except ClientDisconnected:
            logger.warning("Client disconnected; cancelled commit message generation.")
            return JSONResponse(
                status_code=CLIENT_CLOSED_REQUEST,
                content=ErrorOutput(error="Client disconnected").model_dump(),
            )

    return app


def build_app() -> FastAPI:
    """Builds the app from the environment; served as ``uvicorn commit_api.main:app``."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return create_app(settings)


app = build_app()


def serve() -> None:
    """Runs the app under uvicorn on HOST:PORT (the `commit-api` console script)."""
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    serve()
