from .base import ProviderAdapter
from .client import DEFAULT_BASE_URL, GeminiChatClient
from .providers import INCLUDE_THOUGHTS_KEY, THINKING_BUDGET_KEY, GeminiAdapter

__all__ = [
    "DEFAULT_BASE_URL",
    "GeminiAdapter",
    "GeminiChatClient",
    "INCLUDE_THOUGHTS_KEY",
    "ProviderAdapter",
    "THINKING_BUDGET_KEY",
]
