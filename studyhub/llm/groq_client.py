from __future__ import annotations

import logging
from dataclasses import dataclass

from groq import AsyncGroq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an experienced university tutor who recommends study resources. "
    "Follow the requested output format exactly and do not add commentary "
    "before or after the suggestions."
)


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    text: str = ""
    error: str | None = None


async def generate_text(
    prompt: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> GenerationResult:
    """
    Send ``prompt`` to the Groq chat API and return the generated text.

    Never raises: a disabled client, missing key, API error or empty reply
    all come back as ``GenerationResult(success=False)``.
    """
    if not config.enabled or not config.api_key:
        return GenerationResult(success=False, error="LLM disabled")

    if not prompt.strip():
        return GenerationResult(success=False, error="Empty prompt")

    try:
        client = AsyncGroq(api_key=config.api_key, timeout=config.timeout)
        logger.info("Groq request: model=%s, max_tokens=%d", config.model, config.max_tokens)
        response = await client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        content = response.choices[0].message.content or ""
    except Exception as exc:
        logger.warning("Groq LLM call failed", exc_info=True)
        return GenerationResult(success=False, error=str(exc))

    if not content.strip():
        return GenerationResult(success=False, error="Empty response")

    logger.info("Groq response: %d chars", len(content))
    return GenerationResult(success=True, text=content)
