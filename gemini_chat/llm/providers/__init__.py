from .gemini import INCLUDE_THOUGHTS_KEY, THINKING_BUDGET_KEY, GeminiAdapter

__all__ = [
    "GeminiAdapter",
    "INCLUDE_THOUGHTS_KEY",
    "THINKING_BUDGET_KEY",
]
