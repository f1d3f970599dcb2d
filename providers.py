"""Unified completion interface over the hosted LLM providers.

OpenAI and Anthropic are reached through their own SDKs. Perplexity and
DeepSeek expose OpenAI-compatible chat endpoints, so they go through the
openai SDK with a different ``base_url``. Gemini is reached through
google-generativeai.

API keys are read at call time, which lets callers (and tests) change the
environment without reloading the module.
"""
import json
import logging
import re
from typing import Dict, Optional

import config

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """The upstream LLM call failed or returned nothing usable."""


class ProviderNotConfiguredError(ProviderError):
    """No API key is configured for the requested provider."""


class UnknownProviderError(ValueError):
    pass


def resolve_provider(provider: Optional[str]) -> str:
    name = (provider or config.DEFAULT_PROVIDER).strip().lower()
    if name not in config.PROVIDERS:
        raise UnknownProviderError(
            f"Unknown provider '{provider}'. Allowed providers: {', '.join(config.PROVIDERS)}"
        )
    return name


def provider_status() -> Dict[str, bool]:
    return {name: bool(config.api_key_for(name)) for name in config.PROVIDERS}


def complete(prompt: str, provider: Optional[str] = None, system: Optional[str] = None,
             max_tokens: Optional[int] = None, temperature: float = 0.2) -> str:
    """Send a single prompt to ``provider`` and return the reply text.

    Raises UnknownProviderError for a bad provider name,
    ProviderNotConfiguredError when its key is missing and ProviderError when
    the call fails or the reply is empty.
    """
    name = resolve_provider(provider)
    api_key = config.api_key_for(name)
    if not api_key:
        raise ProviderNotConfiguredError(
            f"{config.PROVIDER_KEYS[name]} is not set; {name} is unavailable"
        )
    max_tokens = max_tokens or config.MAX_TOKENS

    logger.info(f"Sending {len(prompt)} chars to {name} ({config.model_for(name)})")
    if name == 'anthropic':
        reply = _complete_anthropic(api_key, prompt, system, max_tokens, temperature)
    elif name == 'gemini':
        reply = _complete_gemini(api_key, prompt, system, max_tokens, temperature)
    else:
        reply = _complete_openai_compatible(name, api_key, prompt, system, max_tokens, temperature)

    if not reply or not reply.strip():
        raise ProviderError(f"{name} returned an empty response")
    return reply.strip()


def _complete_openai_compatible(name, api_key, prompt, system, max_tokens, temperature):
    from openai import OpenAI, OpenAIError

    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    try:
        client = OpenAI(api_key=api_key, base_url=config.PROVIDER_BASE_URLS.get(name))
        response = client.chat.completions.create(
            model=config.model_for(name),
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
        )
    except OpenAIError as e:
        logger.error(f"{name} request failed: {e}")
        raise ProviderError(f"{name} request failed: {e}") from e
    return response.choices[0].message.content or ""


def _complete_anthropic(api_key, prompt, system, max_tokens, temperature):
    from anthropic import Anthropic, AnthropicError

    kwargs = {
        "model": config.model_for('anthropic'),
        "max_tokens": max_tokens,
        "temperature": temperature,
        "messages": [{"role": "user", "content": prompt}],
    }
    if system:
        kwargs["system"] = system
    try:
        response = Anthropic(api_key=api_key).messages.create(**kwargs)
    except AnthropicError as e:
        logger.error(f"anthropic request failed: {e}")
        raise ProviderError(f"anthropic request failed: {e}") from e
    return "".join(block.text for block in response.content if getattr(block, "type", None) == "text")


def _complete_gemini(api_key, prompt, system, max_tokens, temperature):
    import google.generativeai as genai
    from google.api_core import exceptions as google_exceptions

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(config.model_for('gemini'), system_instruction=system)
    try:
        response = model.generate_content(
            prompt,
            generation_config={"max_output_tokens": max_tokens, "temperature": temperature},
        )
        return response.text
    except (google_exceptions.GoogleAPIError, ValueError) as e:
        # response.text raises ValueError when the candidate was blocked
        logger.error(f"gemini request failed: {e}")
        raise ProviderError(f"gemini request failed: {e}") from e


def extract_json(response_text: str) -> dict:
    """Extract and parse the JSON object from an LLM reply.

    Handles ```json fenced blocks and replies with prose around the object.
    Raises ValueError when no JSON object can be parsed.
    """
    if not isinstance(response_text, str):
        raise ValueError("Response is not text")
    text = response_text.strip()
    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
    if fenced:
        text = fenced.group(1).strip()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        json_start = text.find('{')
        json_end = text.rfind('}') + 1
        if json_start == -1 or json_end == 0:
            raise ValueError("No valid JSON found in response")
        try:
            parsed = json.loads(text[json_start:json_end])
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object")
    return parsed


def as_dict(value) -> dict:
    """Nested reply field as a dict; models sometimes answer a section with a bare string."""
    return value if isinstance(value, dict) else {}


def as_list(value) -> list:
    """Nested reply field as a list of strings; a lone string or number becomes one item."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]
