"""
Claude client used by the explainer.

Sends one prompt per configuration document and returns the text of the
reply. Transient API failures (rate limits, connection problems, server
errors) are retried with exponential backoff; anything else fails at once
with ExplanationError so the explainer can fall back to its offline summary.
"""

from __future__ import annotations

import os
import time
import hashlib
import logging
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import anthropic

from ..errors import ExplanationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"

_RETRYABLE = (
    anthropic.RateLimitError,
    anthropic.APIConnectionError,
    anthropic.InternalServerError,
)


@dataclass
class LLMConfig:
    """Settings for the Claude client; the API key falls back to ANTHROPIC_API_KEY"""
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_tokens: int = 500
    temperature: float = 0.7
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    cache_size: int = 64

    def __post_init__(self):
        if self.api_key is None:
            self.api_key = os.environ.get("ANTHROPIC_API_KEY")


@dataclass
class Completion:
    """Text returned for one prompt"""
    text: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str = ""
    cached: bool = False


@dataclass
class UsageStats:
    requests: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cache_hits: int = 0
    failures: int = 0

    def record(self, completion: Completion) -> None:
        self.requests += 1
        self.input_tokens += completion.input_tokens
        self.output_tokens += completion.output_tokens

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LLMClient:
    """
    Thin wrapper over ``anthropic.Anthropic`` for single-turn prompts.

    Identical prompts are answered from a small in-memory LRU cache.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()
        self.stats = UsageStats()
        self._cache: "OrderedDict[str, Completion]" = OrderedDict()
        self._client: Optional[anthropic.Anthropic] = None

        if self.config.api_key:
            self._client = anthropic.Anthropic(
                api_key=self.config.api_key,
                timeout=self.config.timeout,
                max_retries=0,
            )
            logger.info(f"Claude client ready (model {self.config.model})")
        else:
            logger.info("ANTHROPIC_API_KEY not set, explanations will use the offline summary")

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def _cache_key(self, prompt: str, system: Optional[str]) -> str:
        digest = hashlib.sha256()
        for part in (self.config.model, system or "", prompt):
            digest.update(part.encode('utf-8'))
            digest.update(b'\0')
        return digest.hexdigest()

    def complete(self, prompt: str, system: Optional[str] = None) -> Completion:
        """
        Ask Claude for a reply to a single user prompt.

        Raises:
            ExplanationError: If no API key is configured or every attempt fails
        """
        if self._client is None:
            raise ExplanationError("Claude client is not configured", source="llm")

        key = self._cache_key(prompt, system)
        if key in self._cache:
            self._cache.move_to_end(key)
            self.stats.cache_hits += 1
            cached = self._cache[key]
            return Completion(**{**asdict(cached), 'cached': True})

        params: Dict[str, Any] = {
            'model': self.config.model,
            'max_tokens': self.config.max_tokens,
            'temperature': self.config.temperature,
            'messages': [{'role': 'user', 'content': prompt}],
        }
        if system:
            params['system'] = system

        completion = self._send(params)
        self.stats.record(completion)

        if self.config.cache_size > 0:
            self._cache[key] = completion
            while len(self._cache) > self.config.cache_size:
                self._cache.popitem(last=False)
        return completion

    def _send(self, params: Dict[str, Any]) -> Completion:
        attempts = max(1, self.config.max_retries)
        for attempt in range(1, attempts + 1):
            try:
                response = self._client.messages.create(**params)
            except _RETRYABLE as e:
                self.stats.failures += 1
                if attempt == attempts:
                    raise ExplanationError(
                        f"Claude request failed after {attempts} attempts: {e}", source="llm"
                    ) from e
                delay = self.config.retry_delay * (2 ** (attempt - 1))
                logger.warning(f"Claude request failed ({type(e).__name__}), retrying in {delay:.1f}s")
                time.sleep(delay)
            except anthropic.APIError as e:
                self.stats.failures += 1
                raise ExplanationError(f"Claude request rejected: {e}", source="llm") from e
            else:
                text = "".join(
                    block.text for block in response.content if getattr(block, 'type', '') == 'text'
                )
                return Completion(
                    text=text,
                    model=response.model,
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                    stop_reason=response.stop_reason or "",
                )

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.to_dict()

    def clear_cache(self) -> None:
        self._cache.clear()


def create_llm_client(api_key: Optional[str] = None, model: Optional[str] = None) -> LLMClient:
    """Build a client, reading the API key from the environment when not given"""
    config = LLMConfig(api_key=api_key)
    if model:
        config.model = model
    return LLMClient(config)
