from .grok_adaptor import GrokAdaptor, RateLimitError, parse_ai_json, FALLBACK_RESPONSE

__all__ = [
    "GrokAdaptor",
    "RateLimitError",
    "parse_ai_json",
    "FALLBACK_RESPONSE",
]
