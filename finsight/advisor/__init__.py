"""
Finsight AI advisor.

Builds a text summary of the user's finances and asks Gemini models for
advice, falling back through the model list on quota or availability errors.
"""

from finsight.advisor.context import (
    SYSTEM_PROMPT,
    QUICK_PROMPTS,
    CURRENCIES,
    build_financial_context,
    build_contents,
)
from finsight.advisor.gemini import (
    MODELS,
    GenerationResult,
    ModelAdapter,
    GeminiAdapter,
    gemini_adapters,
    generate_with_fallback,
    AdvisorService,
)

__all__ = [
    "SYSTEM_PROMPT",
    "QUICK_PROMPTS",
    "CURRENCIES",
    "build_financial_context",
    "build_contents",
    "MODELS",
    "GenerationResult",
    "ModelAdapter",
    "GeminiAdapter",
    "gemini_adapters",
    "generate_with_fallback",
    "AdvisorService",
]
