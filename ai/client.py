"""
Shared helpers for calls to the OpenAI API
"""

import json
import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from ai.config import ai_config
from shared.exceptions import AIUnavailableError

logger = logging.getLogger(__name__)


async def complete(prompt: str, *, json_mode: bool = False, max_tokens: Optional[int] = None) -> Optional[str]:
    """
    Send a single-message prompt and return the text of the answer

    Args:
        prompt: User message
        json_mode: Ask the model for a JSON object
        max_tokens: Completion token limit

    Returns:
        Answer text (None if empty)

    Raises:
        AIUnavailableError: If no API key is configured
    """
    if not ai_config.is_configured:
        raise AIUnavailableError("OPENAI_API_KEY is not configured")

    options = {}
    if json_mode:
        options['response_format'] = {'type': 'json_object'}

    async with AsyncOpenAI(api_key=ai_config.OPENAI_API_KEY, timeout=ai_config.TIMEOUT) as client:
        response = await client.chat.completions.create(
            model=ai_config.GPT_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            max_completion_tokens=max_tokens or ai_config.MAX_TOKENS,
            **options
        )

    return response.choices[0].message.content or None


def parse_json_response(text: Optional[str]) -> Optional[Any]:
    """
    Parse JSON from a model answer (handling markdown code blocks)

    Returns:
        Decoded value or None
    """
    if not text:
        return None

    text = text.strip()

    # Remove ```json or ``` at start
    if text.startswith('```'):
        lines = text.split('\n')
        text = '\n'.join(lines[1:])

    # Remove ``` at end
    if text.rstrip().endswith('```'):
        text = text.rstrip()[:-3]

    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as e:
        logger.error(f"JSON decode error: {e}. Text: {text[:200]}")
        return None
