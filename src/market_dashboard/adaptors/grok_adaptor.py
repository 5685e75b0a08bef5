import json
import re
import time

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_incrementing

from market_dashboard.config import AIConfig
from market_dashboard.errors import UpstreamError

SYSTEM_PROMPT = (
    "You are an Indian stock market analyst. Provide factual, concise analysis "
    "based only on verifiable news. Always return valid JSON format."
)

FALLBACK_RESPONSE = {
    "headline": "No specific news identified",
    "reason": "Technical gap or sector movement",
    "newsCategory": "NO_NEWS",
    "sentiment": "Neutral",
    "confidence": "Low",
    "priceAction": "Monitor",
    "details": "No verifiable news found",
}

_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class RateLimitError(UpstreamError):
    """Provider answered 429"""


def parse_ai_json(content):
    """
    Parse a model reply that should be a JSON object.

    Code fences are stripped first; failing that, the outermost {...} block
    is tried. Replies that still do not parse yield FALLBACK_RESPONSE.
    """
    if not content:
        return dict(FALLBACK_RESPONSE)
    cleaned = _FENCE.sub("", content).strip()
    try:
        parsed = json.loads(cleaned)
        if isinstance(parsed, dict):
            return parsed
    except ValueError:
        pass
    match = _JSON_BLOCK.search(content)
    if match:
        try:
            parsed = json.loads(match.group(0))
            if isinstance(parsed, dict):
                return parsed
        except ValueError:
            pass
    return dict(FALLBACK_RESPONSE)


class GrokAdaptor:
    """
    Client for an OpenAI-style chat completions endpoint.

    Rate-limited calls are retried with linearly increasing waits; any other
    failure is logged and raised as UpstreamError straight away.
    """

    def __init__(self, config, logger, session=None):
        self.api_key = config.get('api_key')
        self.api_url = config['api_url']
        self.model = config['model']
        self.timeout = config.get('timeout', AIConfig.request_timeout_seconds)
        self.max_attempts = config.get('max_attempts', AIConfig.max_attempts)
        self.backoff_start = config.get('backoff_start', AIConfig.backoff_start_seconds)
        self.backoff_increment = config.get('backoff_increment', AIConfig.backoff_increment_seconds)
        self.logger = logger
        self.session = session or requests.Session()

    @property
    def is_configured(self):
        return bool(self.api_key)

    def _retrying(self):
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_incrementing(start=self.backoff_start, increment=self.backoff_increment),
            retry=retry_if_exception_type(RateLimitError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    def _log_retry(self, retry_state):
        self.logger.warning(
            f"AI provider rate limited, retrying (attempt {retry_state.attempt_number}/{self.max_attempts})"
        )

    def _post(self, payload):
        response = self.session.post(
            self.api_url,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            timeout=self.timeout,
        )
        if response.status_code == 429:
            raise RateLimitError("AI provider rate limit exceeded")
        response.raise_for_status()
        return response.json()

    def complete(self, prompt, system_prompt=SYSTEM_PROMPT):
        """
        Send one prompt and return the reply text.

        Raises:
            UpstreamError: Missing key, exhausted retries or any HTTP failure
        """
        if not self.is_configured:
            raise UpstreamError("AI provider API key not configured")

        payload = {
            "messages": [{"role": "user", "content": f"{system_prompt}\n\n{prompt}"}],
            "model": self.model,
            "stream": False,
        }
        start = time.time()
        try:
            data = self._retrying()(self._post, payload)
        except RateLimitError as e:
            self.logger.error(f"AI provider still rate limited after {self.max_attempts} attempts")
            raise UpstreamError("AI provider rate limit exceeded", cause=e)
        except requests.RequestException as e:
            self.logger.error(f"AI provider request failed: {e}")
            raise UpstreamError("AI provider request failed", cause=e)

        try:
            content = data["choices"][0]["message"]["content"].strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            self.logger.error(f"Unexpected AI provider response shape: {e}")
            raise UpstreamError("Unexpected AI provider response", cause=e)

        usage = data.get("usage") or {}
        self.logger.info(
            f"AI response in {time.time() - start:.1f}s, tokens={usage.get('total_tokens', 'n/a')}"
        )
        return content

    def analyze(self, prompt):
        """complete() followed by lenient JSON parsing"""
        return parse_ai_json(self.complete(prompt))

    def test_connection(self):
        start = time.time()
        reply = self.complete('Reply with the JSON {"status": "ok"}.')
        return {
            "reply": reply,
            "model": self.model,
            "responseTime": f"{time.time() - start:.1f}s",
        }
