"""HTTP relay: ``POST /api/chat`` → LiteLLM streaming completion.

Request body: ``{"contents": [Part, ...]}``.
Success: ``text/plain; charset=utf-8`` body streamed as the model generates.
Failure before streaming starts: JSON ``{"error": "..."}`` with 400/500.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from fileshift.chat import llm_client

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)


def create_app(model: str) -> FastAPI:
    app = FastAPI(title="fileshift relay", version="0.1.0")

    @app.post("/api/chat")
    async def chat(request: Request):
        try:
            llm_client.validate_api_key(model)
        except EnvironmentError as exc:
            return _error(500, str(exc))

        try:
            body = await request.json()
        except ValueError:
            return _error(400, "Request body must be JSON")

        contents = body.get("contents") if isinstance(body, dict) else None
        if not contents:
            return _error(400, 'Missing "contents" in request body')

        try:
            messages = llm_client.parts_to_messages(contents)
            deltas = await llm_client.stream_completion(model, messages)
        except Exception as exc:
            logger.exception("Error in chat endpoint")
            return _error(500, f"An error occurred on the server: {str(exc) or 'Unknown error'}")

        async def _body() -> AsyncIterator[bytes]:
            async for text in deltas:
                yield text.encode("utf-8")

        return StreamingResponse(_body(), media_type="text/plain; charset=utf-8")

    return app
