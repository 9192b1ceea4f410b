"""Combine a primary AI answer with verifier answers.

Grok answers first; OpenAI and DeepSeek, when configured, answer the same
question from a verification angle. Agreement is judged here from
contradictory keyword pairs, not by asking a model.
"""

from dataclasses import dataclass, field

import httpx

from fleetops.errors import AIProviderError
from fleetops.utils.config import AIConfig
from fleetops.utils.logger import get_logger

from .providers import AIResponse, ChatProvider

logger = get_logger(__name__)

CONTRADICTORY_PAIRS: list[tuple[str, str]] = [
    ("safe", "unsafe"),
    ("recommended", "not recommended"),
    ("yes", "no"),
    ("should", "should not"),
    ("correct", "incorrect"),
]

DISAGREEMENT_NOTE = "[Note: Multiple AI systems provided input for accuracy]"
FALLBACK_MESSAGE = (
    "I apologize, but I'm having technical difficulties. Please try again."
)


@dataclass
class UnifiedResponse:
    primary: AIResponse
    verification: list[AIResponse] = field(default_factory=list)
    consensus: str = ""
    confidence: float = 0.0
    verified: bool = True


def has_significant_disagreement(first: str, second: str) -> bool:
    """True when one answer uses a word and the other its opposite.

    Matching is by case-insensitive substring, so ``"unsafe"`` also
    counts as containing ``"safe"``.
    """
    a = first.lower()
    b = second.lower()
    return any(
        (w1 in a and w2 in b) or (w2 in a and w1 in b)
        for w1, w2 in CONTRADICTORY_PAIRS
    )


def build_unified_response(
    primary: AIResponse, verifications: list[AIResponse]
) -> UnifiedResponse:
    """Merge answers into one response with an averaged confidence."""
    answers = [primary, *verifications]
    confidence = sum(a.confidence for a in answers) / len(answers)
    verified = all(
        not has_significant_disagreement(primary.response, v.response)
        for v in verifications
    )

    consensus = primary.response
    if verifications and not verified:
        consensus = f"{primary.response}\n\n{DISAGREEMENT_NOTE}"

    return UnifiedResponse(
        primary=primary,
        verification=list(verifications),
        consensus=consensus,
        confidence=confidence,
        verified=verified,
    )


class UnifiedAssistant:
    """Yacht management assistant backed by several chat providers.

    Args:
        config: AI configuration with provider keys.
        client: Shared HTTP client for all providers.
    """

    def __init__(self, config: AIConfig, client: httpx.Client | None = None) -> None:
        self.primary = ChatProvider.from_config("grok", config, client)
        self.verifiers = [
            provider
            for provider in (
                ChatProvider.from_config("openai", config, client),
                ChatProvider.from_config("deepseek", config, client),
            )
            if provider is not None
        ]

    def ask(
        self, prompt: str, context: str = "yacht management assistant"
    ) -> UnifiedResponse:
        """Answer a prompt and cross-check it with the verifiers.

        Raises:
            AIProviderError: If Grok is not configured or its call fails.
                Verifier failures are logged and dropped.
        """
        if self.primary is None:
            raise AIProviderError("Grok API key not configured", provider="grok")

        primary = self.primary.ask(prompt, context)

        verifications: list[AIResponse] = []
        for verifier in self.verifiers:
            try:
                verifications.append(verifier.ask(prompt, context))
            except AIProviderError as exc:
                logger.warning("Verifier %s failed: %s", verifier.name, exc)

        result = build_unified_response(primary, verifications)
        logger.info(
            "Unified answer from %d providers (verified=%s, confidence=%.2f)",
            1 + len(verifications),
            result.verified,
            result.confidence,
        )
        return result
