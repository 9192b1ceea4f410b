"""Tests for the AI provider clients, consensus and the Yachtie engine."""

import json
from unittest.mock import MagicMock

import httpx
import pytest

from fleetops.ai.consensus import (
    DISAGREEMENT_NOTE,
    UnifiedAssistant,
    build_unified_response,
    has_significant_disagreement,
)
from fleetops.ai.providers import AIResponse, ChatProvider, SpeechClient
from fleetops.ai.vision import VisionClient
from fleetops.ai.warranty_ai import WarrantyAIExtractor
from fleetops.ai.yachtie import YachtieEngine, YachtieService, estimate_tokens
from fleetops.errors import AIProviderError, FunctionError
from fleetops.utils.config import AIConfig


def _chat_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _ai_config(**keys: str | None) -> AIConfig:
    defaults = {
        "openai_api_key": None,
        "grok_api_key": None,
        "deepseek_api_key": None,
        "google_vision_api_key": None,
    }
    return AIConfig(**{**defaults, **keys})


class TestChatProvider:
    def test_complete_sends_bearer_and_model(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_chat_reply("All clear"))

        provider = ChatProvider(
            "grok", "https://api.x.ai/v1/", "key-1", "grok-beta", client=_client(handler)
        )
        reply = provider.complete([{"role": "user", "content": "hi"}], max_tokens=10)

        assert reply == "All clear"
        request = seen[0]
        assert str(request.url) == "https://api.x.ai/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer key-1"
        body = json.loads(request.content)
        assert body["model"] == "grok-beta"
        assert body["max_tokens"] == 10

    def test_http_error_status(self) -> None:
        provider = ChatProvider(
            "openai",
            "https://api.openai.com/v1",
            "k",
            "m",
            client=_client(lambda r: httpx.Response(429, text="rate limited")),
        )
        with pytest.raises(AIProviderError) as exc_info:
            provider.complete([])
        assert exc_info.value.status_code == 429
        assert exc_info.value.provider == "openai"

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = ChatProvider("grok", "https://api.x.ai/v1", "k", "m", client=_client(handler))
        with pytest.raises(AIProviderError, match="request failed"):
            provider.complete([])

    def test_unexpected_body(self) -> None:
        provider = ChatProvider(
            "grok",
            "https://api.x.ai/v1",
            "k",
            "m",
            client=_client(lambda r: httpx.Response(200, json={"choices": []})),
        )
        with pytest.raises(AIProviderError, match="unexpected body"):
            provider.complete([])

    def test_ask_uses_preset(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=_chat_reply("Checked"))

        provider = ChatProvider(
            "deepseek", "https://api.deepseek.com/v1", "k", "m", client=_client(handler)
        )
        answer = provider.ask("Is the anchor rated?", "deck crew")

        assert answer == AIResponse(
            provider="deepseek",
            response="Checked",
            confidence=0.8,
            reasoning="DeepSeek technical verification",
        )
        body = seen[0]
        assert body["temperature"] == 0.2
        assert "deck crew" in body["messages"][0]["content"]
        assert body["messages"][1]["content"] == (
            "Technical verification needed: Is the anchor rated?"
        )

    def test_from_config_without_key(self) -> None:
        assert ChatProvider.from_config("grok", _ai_config()) is None
        provider = ChatProvider.from_config("grok", _ai_config(grok_api_key="g"))
        assert provider is not None
        assert provider.base_url == "https://api.x.ai/v1"


class TestVisionClient:
    def test_detect_text(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"responses": [{"textAnnotations": [{"description": "MTU 12V2000"}]}]},
            )

        text = VisionClient("vkey", client=_client(handler)).detect_text(b"\x89PNG")

        assert text == "MTU 12V2000"
        assert seen[0].url.params["key"] == "vkey"
        body = json.loads(seen[0].content)
        assert body["requests"][0]["features"][0]["type"] == "TEXT_DETECTION"

    def test_no_text(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"responses": [{}]}))
        with pytest.raises(AIProviderError, match="No text detected"):
            VisionClient("vkey", client=client).detect_text(b"img")

    def test_error_status(self) -> None:
        client = _client(lambda r: httpx.Response(403, json={}))
        with pytest.raises(AIProviderError) as exc_info:
            VisionClient("vkey", client=client).detect_text(b"img")
        assert exc_info.value.status_code == 403

    def test_non_json_body(self) -> None:
        client = _client(lambda r: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(AIProviderError, match="unexpected body"):
            VisionClient("vkey", client=client).detect_text(b"img")


class TestSpeechClient:
    def test_requires_openai_key(self) -> None:
        with pytest.raises(AIProviderError, match="not configured"):
            SpeechClient(_ai_config())

    def test_transcribe(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"text": "check the bilge pumps"})

        speech = SpeechClient(_ai_config(openai_api_key="o"), client=_client(handler))
        assert speech.transcribe(b"audio") == "check the bilge pumps"
        assert seen[0].url.path == "/v1/audio/transcriptions"

    def test_synthesize(self) -> None:
        speech = SpeechClient(
            _ai_config(openai_api_key="o"),
            client=_client(lambda r: httpx.Response(200, content=b"ID3mp3")),
        )
        assert speech.synthesize("Bilge pumps checked") == b"ID3mp3"


class TestWarrantyAIExtractor:
    TEXT = "Manufacturer: Volvo Penta\nWarranty period: 24 months"

    def _provider(self, reply: str | None = None, error: bool = False) -> MagicMock:
        provider = MagicMock()
        if error:
            provider.complete.side_effect = AIProviderError("down", provider="openai")
        else:
            provider.complete.return_value = reply
        return provider

    def test_without_provider_uses_regex(self) -> None:
        assert WarrantyAIExtractor().extract(self.TEXT) == {
            "duration_months": 24,
            "manufacturer": "Volvo Penta",
        }

    def test_json_reply(self) -> None:
        reply = '```json\n{"manufacturer": "Volvo Penta", "duration_months": 24}\n```'
        result = WarrantyAIExtractor(self._provider(reply)).extract(self.TEXT)
        assert result == {"manufacturer": "Volvo Penta", "duration_months": 24}

    def test_invalid_json_falls_back(self) -> None:
        result = WarrantyAIExtractor(self._provider("I think 24 months")).extract(self.TEXT)
        assert result["duration_months"] == 24

    def test_non_object_falls_back(self) -> None:
        result = WarrantyAIExtractor(self._provider("[1, 2]")).extract(self.TEXT)
        assert result["manufacturer"] == "Volvo Penta"

    def test_provider_failure_falls_back(self) -> None:
        result = WarrantyAIExtractor(self._provider(error=True)).extract(self.TEXT)
        assert result["duration_months"] == 24


class TestConsensus:
    def _answer(self, provider: str, text: str, confidence: float) -> AIResponse:
        return AIResponse(provider=provider, response=text, confidence=confidence)

    def test_disagreement_pairs(self) -> None:
        assert has_significant_disagreement("It is safe", "This is unsafe")
        assert has_significant_disagreement("You SHOULD reef", "you should not")
        assert not has_significant_disagreement("Proceed with the passage", "Agreed")

    def test_agreement_keeps_primary_text(self) -> None:
        result = build_unified_response(
            self._answer("grok", "Proceed with the passage", 0.9),
            [self._answer("openai", "Agreed", 0.85)],
        )
        assert result.verified is True
        assert result.consensus == "Proceed with the passage"
        assert result.confidence == pytest.approx(0.875)

    def test_disagreement_adds_note(self) -> None:
        result = build_unified_response(
            self._answer("grok", "It is safe", 0.9),
            [
                self._answer("openai", "This is unsafe", 0.85),
                self._answer("deepseek", "Agreed", 0.8),
            ],
        )
        assert result.verified is False
        assert result.consensus == f"It is safe\n\n{DISAGREEMENT_NOTE}"
        assert result.confidence == pytest.approx(0.85)

    def test_primary_only(self) -> None:
        result = build_unified_response(self._answer("grok", "yes", 0.9), [])
        assert result.verified is True
        assert result.consensus == "yes"
        assert result.confidence == 0.9


class TestUnifiedAssistant:
    def test_requires_grok(self) -> None:
        with pytest.raises(AIProviderError, match="Grok API key not configured"):
            UnifiedAssistant(_ai_config(openai_api_key="o")).ask("hello")

    def test_failed_verifier_dropped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.x.ai":
                return httpx.Response(200, json=_chat_reply("Proceed with the passage"))
            if request.url.host == "api.openai.com":
                return httpx.Response(200, json=_chat_reply("Agreed"))
            return httpx.Response(500, text="boom")

        assistant = UnifiedAssistant(
            _ai_config(grok_api_key="g", openai_api_key="o", deepseek_api_key="d"),
            client=_client(handler),
        )
        result = assistant.ask("Can we leave port at dawn?")

        assert result.primary.provider == "grok"
        assert [v.provider for v in result.verification] == ["openai"]
        assert result.verified is True


class TestYachtieEngine:
    def setup_method(self) -> None:
        self.engine = YachtieEngine()

    def test_estimate_tokens(self) -> None:
        assert estimate_tokens(None) == 50
        assert estimate_tokens("x" * 40) == 60
        assert estimate_tokens("x" * 10_000) == 149

    def test_infer(self) -> None:
        result = self.engine.run("infer", text="hull check")
        assert result["text"] == "Processed: hull check [Yachtie Built-in Response]"
        assert result["service"] == "yachtie-built-in"
        assert result["processing_time_ms"] >= 0

    def test_translate(self) -> None:
        result = self.engine.run("translate", text="Hello", target_language="fr")
        assert result["text"] == "Bonjour"
        assert result["source_language"] == "en"

    def test_unknown_task(self) -> None:
        assert self.engine.run("summarise")["confidence"] == 0.85


class TestYachtieService:
    """Tests for the superadmin model configuration actions."""

    def setup_method(self) -> None:
        self.repository = MagicMock()
        self.repository.active_providers.return_value = [
            {
                "id": "p1",
                "name": "Yachtie",
                "provider_type": "yachtie",
                "is_primary": True,
                "supported_languages": ["en"],
            },
            {"id": "p2", "name": "OpenAI", "provider_type": "openai", "is_primary": False},
        ]
        self.repository.active_models.return_value = [{"id": "m1"}]
        self.repository.active_languages.return_value = [{"language_code": "en"}]
        self.service = YachtieService(self.repository)

    def test_unknown_action(self) -> None:
        with pytest.raises(FunctionError) as exc_info:
            self.service.dispatch("drop_tables", {})
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "UNKNOWN_ACTION"

    def test_status(self) -> None:
        result = self.service.dispatch("status", None)
        assert result["primary_provider"] == "Yachtie"
        assert [p["has_credentials"] for p in result["providers"]] == [True, False]
        assert result["total_languages"] == 1

    def test_status_without_primary(self) -> None:
        self.repository.active_providers.return_value = []
        assert self.service.status({})["primary_provider"] == "Yachtie (Built-in)"

    def test_connections(self) -> None:
        result = self.service.dispatch("test_connections", {})
        assert result["overall_status"] == "healthy"
        assert result["results"]["translation"]["test_translation"] == "Bonjour"

    def test_add_language(self) -> None:
        self.repository.add_language.return_value = {"language_code": "fr"}
        result = self.service.dispatch(
            "add_language", {"language_code": "fr", "language_name": "French"}
        )
        assert result["message"] == "Language French (fr) added successfully"
        self.repository.add_language.assert_called_once_with("fr", "French", "ltr")
        self.repository.update_provider_languages.assert_called_once_with("p1", ["en", "fr"])

    def test_add_language_validation(self) -> None:
        with pytest.raises(FunctionError, match="Missing language_code"):
            self.service.add_language({"language_code": "fr"})
        with pytest.raises(FunctionError, match="ISO 639-1"):
            self.service.add_language({"language_code": "FRA", "language_name": "French"})
        with pytest.raises(FunctionError, match="ISO 639-1"):
            self.service.add_language({"language_code": 12, "language_name": "Twelve"})

    def test_run_inference_logged(self) -> None:
        result = self.service.dispatch(
            "run_inference", {"text": "engine hours", "task": "analyze"}
        )
        assert result["metadata"] == {
            "model_used": "yachtie-multi-v1",
            "language_used": "en",
            "task_type": "analyze",
        }
        logged = self.repository.log_inference.call_args.args[0]
        assert logged["request_type"] == "analyze"
        assert logged["status"] == "success"
        assert logged["prompt"] == "engine hours"

    def test_update_provider_config(self) -> None:
        self.repository.update_provider_config.return_value = {"id": "p2"}
        result = self.service.dispatch(
            "update_provider_config", {"provider_id": "p2", "config": {"temperature": 0.2}}
        )
        assert result["provider"] == {"id": "p2"}
        with pytest.raises(FunctionError):
            self.service.update_provider_config({"provider_id": "p2"})
