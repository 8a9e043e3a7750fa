from typing import Callable

from .base import GenerationJob, MediaBackend, ResultLocator, is_credential_rejection

BackendFactory = Callable[[str], MediaBackend]


def make_backend(provider: str, api_key: str) -> MediaBackend:
    """Build a backend bound to one API key. A new one per call keeps the key a call started with."""
    if provider == "gemini":
        from .gemini import GeminiBackend
        return GeminiBackend(api_key)
    if provider == "openai":
        from .openai_backend import OpenAIBackend
        return OpenAIBackend(api_key)
    raise ValueError(f"unknown generation provider: {provider}")


__all__ = [
    "BackendFactory",
    "GenerationJob",
    "MediaBackend",
    "ResultLocator",
    "is_credential_rejection",
    "make_backend",
]
