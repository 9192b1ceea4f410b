"""HTTP clients for OpenAI-compatible chat and speech APIs.

Grok, OpenAI and DeepSeek all speak the OpenAI chat-completions dialect,
so one client class covers them; the presets below carry each provider's
endpoint, model and the confidence weight its answers get in a unified
response.
"""

from dataclasses import dataclass

import httpx

from fleetops.errors import AIProviderError
from fleetops.utils.config import AIConfig
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AIResponse:
    """One provider's answer to a prompt."""

    provider: str
    response: str
    confidence: float
    reasoning: str = ""


@dataclass
class ProviderPreset:
    name: str
    confidence: float
    reasoning: str
    system_prompt: str
    user_template: str
    temperature: float
    max_tokens: int


PRESETS: dict[str, ProviderPreset] = {
    "grok": ProviderPreset(
        name="grok",
        confidence=0.9,
        reasoning="Primary AI response",
        system_prompt=(
            "You are an advanced yacht management AI assistant. Context: {context}. "
            "Be concise, accurate, and helpful. Focus on yacht operations, safety, "
            "and efficiency."
        ),
        user_template="{prompt}",
        temperature=0.7,
        max_tokens=500,
    ),
    "openai": ProviderPreset(
        name="openai",
        confidence=0.85,
        reasoning="OpenAI verification",
        system_prompt=(
            "You are verifying yacht management responses. Context: {context}. "
            "Provide accurate, safety-focused verification."
        ),
        user_template="Verify and provide alternative perspective: {prompt}",
        temperature=0.3,
        max_tokens=300,
    ),
    "deepseek": ProviderPreset(
        name="deepseek",
        confidence=0.8,
        reasoning="DeepSeek technical verification",
        system_prompt=(
            "You are a technical verification AI for yacht management. "
            "Context: {context}. Focus on technical accuracy and safety validation."
        ),
        user_template="Technical verification needed: {prompt}",
        temperature=0.2,
        max_tokens=300,
    ),
}


class ChatProvider:
    """Client for one OpenAI-compatible chat-completions endpoint.

    Args:
        name: Provider name used in logs and errors.
        base_url: API root, e.g. ``https://api.x.ai/v1``.
        api_key: Bearer token.
        model: Model id sent with each request.
        client: HTTP client; one with ``timeout_s`` is created if omitted.
        timeout_s: Request timeout in seconds.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        model: str,
        client: httpx.Client | None = None,
        timeout_s: float = 30.0,
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.client = client or httpx.Client(timeout=timeout_s)

    @classmethod
    def from_config(
        cls, name: str, config: AIConfig, client: httpx.Client | None = None
    ) -> "ChatProvider | None":
        """Build the named provider, or ``None`` when its key is not set."""
        api_key = getattr(config, f"{name}_api_key")
        if not api_key:
            return None
        return cls(
            name=name,
            base_url=getattr(config, f"{name}_base_url"),
            api_key=api_key,
            model=getattr(config, f"{name}_model"),
            client=client,
            timeout_s=config.timeout_s,
        )

    def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int | None = None,
    ) -> str:
        """Send a chat completion request and return the reply text.

        Raises:
            AIProviderError: On transport failure, a non-2xx status, or a
                body without a reply.
        """
        body: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens

        try:
            response = self.client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise AIProviderError(
                f"{self.name} request failed: {exc}", provider=self.name
            ) from exc

        if not response.is_success:
            raise AIProviderError(
                f"{self.name} API error: {response.status_code} - {response.text}",
                provider=self.name,
                status_code=response.status_code,
            )

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise AIProviderError(
                f"{self.name} returned an unexpected body", provider=self.name
            ) from exc

    def ask(self, prompt: str, context: str) -> AIResponse:
        """Ask a prompt using this provider's preset role and weight."""
        preset = PRESETS[self.name]
        content = self.complete(
            [
                {"role": "system", "content": preset.system_prompt.format(context=context)},
                {"role": "user", "content": preset.user_template.format(prompt=prompt)},
            ],
            temperature=preset.temperature,
            max_tokens=preset.max_tokens,
        )
        logger.debug("%s answered with %d characters", self.name, len(content))
        return AIResponse(
            provider=self.name,
            response=content,
            confidence=preset.confidence,
            reasoning=preset.reasoning,
        )


class SpeechClient:
    """OpenAI speech-to-text and text-to-speech.

    Args:
        config: AI configuration carrying the OpenAI key and models.
        client: HTTP client; created from ``config.timeout_s`` if omitted.
    """

    def __init__(self, config: AIConfig, client: httpx.Client | None = None) -> None:
        if not config.openai_api_key:
            raise AIProviderError("OpenAI API key not configured", provider="openai")
        self.config = config
        self.base_url = config.openai_base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=config.timeout_s)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.openai_api_key}"}

    def transcribe(self, audio: bytes, filename: str = "audio.webm") -> str:
        """Transcribe recorded speech to text."""
        try:
            response = self.client.post(
                f"{self.base_url}/audio/transcriptions",
                headers=self._headers(),
                data={"model": self.config.transcription_model},
                files={"file": (filename, audio)},
            )
        except httpx.HTTPError as exc:
            raise AIProviderError(
                f"Transcription request failed: {exc}", provider="openai"
            ) from exc
        if not response.is_success:
            raise AIProviderError(
                f"Transcription failed: {response.status_code}",
                provider="openai",
                status_code=response.status_code,
            )
        try:
            text = response.json().get("text", "")
        except (ValueError, AttributeError) as exc:
            raise AIProviderError(
                "Transcription returned an unexpected body", provider="openai"
            ) from exc
        logger.info("Transcribed %d bytes of audio to %d characters", len(audio), len(text))
        return text

    def synthesize(self, text: str, voice: str = "alloy") -> bytes:
        """Render text as MP3 speech."""
        try:
            response = self.client.post(
                f"{self.base_url}/audio/speech",
                headers=self._headers(),
                json={
                    "model": self.config.speech_model,
                    "input": text,
                    "voice": voice,
                    "response_format": "mp3",
                },
            )
        except httpx.HTTPError as exc:
            raise AIProviderError(
                f"Speech request failed: {exc}", provider="openai"
            ) from exc
        if not response.is_success:
            raise AIProviderError(
                f"Speech synthesis failed: {response.status_code}",
                provider="openai",
                status_code=response.status_code,
            )
        return response.content
