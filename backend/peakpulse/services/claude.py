"""
Claude Messages API helpers shared by the AI-backed services.

Requests go straight to the HTTP API with httpx; there is no SDK
dependency. Callers own their prompts and decide what a failure means.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from peakpulse.config import Settings

logger = logging.getLogger(__name__)

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class ClaudeNotConfiguredError(RuntimeError):
    """Raised when no API key is set."""


async def complete(settings: Settings, system: str, prompt: str) -> str:
    """Send one user turn and return the concatenated text blocks."""
    if not settings.anthropic_api_key:
        raise ClaudeNotConfiguredError("ANTHROPIC_API_KEY is not configured")

    headers = {
        "x-api-key": settings.anthropic_api_key,
        "anthropic-version": API_VERSION,
        "content-type": "application/json",
    }
    payload = {
        "model": settings.anthropic_model,
        "max_tokens": settings.anthropic_max_tokens,
        "system": system,
        "messages": [{"role": "user", "content": prompt}],
    }

    async with httpx.AsyncClient(timeout=settings.anthropic_timeout_seconds) as client:
        response = await client.post(API_URL, headers=headers, json=payload)
        response.raise_for_status()

    data = response.json()
    return "\n".join(
        block["text"]
        for block in data.get("content", [])
        if block.get("type") == "text"
    )


def parse_json_reply(raw_response: str) -> dict[str, Any]:
    """Parse a JSON object out of a model reply.

    Handles markdown code fences and stray commentary around the object.
    """
    text = raw_response.strip()

    if text.startswith("```"):
        text = text.split("\n", 1)[-1]
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    text = text.strip()

    if not text.startswith("{"):
        start = text.find("{")
        end = text.rfind("}") + 1
        if start != -1 and end > start:
            text = text[start:end]

    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object in model reply")
    return parsed
