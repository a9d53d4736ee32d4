"""LiteLLM wrapper used by the relay endpoint.

All model calls route through this module. LiteLLM's built-in retry is used
(num_retries=3). API key presence is checked before a request is relayed.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

import litellm

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]


# ------------------------------------------------------------------
# Provider → env var mapping for API key validation
# ------------------------------------------------------------------

_PROVIDER_ENV: dict[str, str | None] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "azure": "AZURE_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "mistral": "MISTRAL_API_KEY",
    "groq": "GROQ_API_KEY",
    "ollama": None,  # Local, no key required
    "ollama_chat": None,
}


def validate_api_key(model: str) -> None:
    """Check that the required API key env var is set for *model*.

    Args:
        model: LiteLLM model string in 'provider/model' format.

    Raises:
        EnvironmentError: If the required key is missing from environment.
    """
    provider = model.split("/")[0].lower() if "/" in model else "openai"
    env_var = _PROVIDER_ENV.get(provider, f"{provider.upper()}_API_KEY")

    if env_var is None:
        return

    if not os.getenv(env_var):
        raise EnvironmentError(
            f"API key not found for provider '{provider}'. "
            f"Set the {env_var} environment variable."
        )


def parts_to_messages(parts: list[dict]) -> list[dict]:
    """Translate request parts into a single OpenAI-style user message."""
    content: list[dict] = []
    for part in parts:
        if "inlineData" in part:
            inline = part["inlineData"]
            url = f"data:{inline['mimeType']};base64,{inline['data']}"
            content.append({"type": "image_url", "image_url": {"url": url}})
        elif "text" in part:
            content.append({"type": "text", "text": str(part["text"])})
        else:
            raise ValueError(f"Unsupported part: {sorted(part)}")
    return [{"role": "user", "content": content}]


async def stream_completion(
    model: str,
    messages: list[dict],
    num_retries: int = 3,
) -> AsyncIterator[str]:
    """Start a streaming completion and return an iterator of text deltas.

    The request is issued before this coroutine returns, so connection and
    authentication failures surface here rather than mid-stream.

    Raises:
        litellm.exceptions.APIError: On persistent API failure after retries.
    """
    response = await litellm.acompletion(
        model=model,
        messages=messages,
        stream=True,
        num_retries=num_retries,
    )

    async def _deltas() -> AsyncIterator[str]:
        async for chunk in response:
            text = chunk.choices[0].delta.content
            if text:
                yield text

    return _deltas()
