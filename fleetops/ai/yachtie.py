"""Built-in Yachtie engine.

Yachtie is the in-house assistant model. It needs no API key; each task
returns a canned result shape with the processing time and an estimate
of tokens used. :class:`YachtieService` implements the superadmin actions
for provider, model and language configuration.
"""

import json
import re
import time
from typing import Any

from fleetops.db.repository import FleetRepository
from fleetops.errors import FunctionError
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)

YACHTIE_MODEL = "yachtie-multi-v1"
TASKS = ("infer", "ocr", "translate", "analyze", "sentiment")
ISO_639_1 = re.compile(r"[a-z]{2}")


def estimate_tokens(text: str | None) -> int:
    """Roughly four characters per token, reported between 50 and 149."""
    return 50 + min(len(text or "") // 4, 99)


class YachtieEngine:
    def run(
        self,
        task: str = "infer",
        text: str | None = None,
        language: str | None = None,
        target_language: str | None = None,
    ) -> dict[str, Any]:
        """Run one Yachtie task and return its result payload."""
        started = time.perf_counter()

        if task == "infer":
            result: dict[str, Any] = {
                "text": f"Processed: {text or 'No input'} [Yachtie Built-in Response]",
                "confidence": 0.95,
                "model_used": YACHTIE_MODEL,
            }
        elif task == "ocr":
            result = {
                "text": "Sample OCR result from built-in Yachtie",
                "confidence": 0.88,
                "detected_languages": [language or "en"],
            }
        elif task == "translate":
            result = {
                "text": "Bonjour" if target_language == "fr" else "Hello",
                "source_language": language or "en",
                "target_language": target_language or "en",
                "confidence": 0.92,
            }
        elif task == "analyze":
            result = {
                "analysis": "Built-in content analysis completed",
                "categories": ["general"],
                "confidence": 0.90,
            }
        elif task == "sentiment":
            result = {"sentiment": "neutral", "confidence": 0.87, "score": 0.5}
        else:
            result = {
                "text": "Built-in Yachtie processing completed",
                "confidence": 0.85,
            }

        result["processing_time_ms"] = int((time.perf_counter() - started) * 1000)
        result["tokens_used"] = estimate_tokens(text)
        result["service"] = "yachtie-built-in"
        return result


class YachtieService:
    """Admin actions for the multi-model AI configuration.

    Args:
        repository: Database access for providers, models and languages.
        engine: Built-in Yachtie engine.
    """

    ACTIONS = (
        "status",
        "test_connections",
        "add_language",
        "run_inference",
        "update_provider_config",
    )

    def __init__(
        self, repository: FleetRepository, engine: YachtieEngine | None = None
    ) -> None:
        self.repository = repository
        self.engine = engine or YachtieEngine()

    def dispatch(self, action: str, payload: dict[str, Any] | None) -> dict[str, Any]:
        """Run an admin action by name.

        Raises:
            FunctionError: 400 for an unknown action or a bad payload.
            RepositoryError: If a database operation fails.
        """
        if action not in self.ACTIONS:
            raise FunctionError("Unknown action", status_code=400, code="UNKNOWN_ACTION")
        logger.info("Yachtie admin action: %s", action)
        return getattr(self, action)(payload or {})

    def status(self, payload: dict[str, Any]) -> dict[str, Any]:
        providers = self.repository.active_providers()
        models = self.repository.active_models()
        languages = self.repository.active_languages()
        primary = next((p for p in providers if p.get("is_primary")), None)
        return {
            "providers": [
                {**p, "has_credentials": p.get("provider_type") == "yachtie"}
                for p in providers
            ],
            "models": models,
            "languages": languages,
            "primary_provider": primary["name"] if primary else "Yachtie (Built-in)",
            "total_languages": len(languages),
            "yachtie_configured": True,
        }

    def test_connections(self, payload: dict[str, Any]) -> dict[str, Any]:
        started = time.perf_counter()
        ping = self.engine.run("infer", text="ping", language="en")
        results: dict[str, Any] = {
            "yachtie": {
                "status": "ok",
                "latency_ms": int((time.perf_counter() - started) * 1000),
                "response_preview": ping["text"][:50],
            }
        }
        self.engine.run("ocr", language="en")
        results["ocr"] = {
            "status": "ok",
            "capabilities": ["text_detection", "image_analysis"],
        }
        translated = self.engine.run(
            "translate", text="Hello", language="en", target_language="fr"
        )
        results["translation"] = {
            "status": "ok",
            "test_translation": translated["text"],
        }
        return {
            "results": results,
            "total_ms": int((time.perf_counter() - started) * 1000),
            "overall_status": "healthy",
        }

    def add_language(self, payload: dict[str, Any]) -> dict[str, Any]:
        code = payload.get("language_code")
        name = payload.get("language_name")
        if not code or not name:
            raise FunctionError("Missing language_code or language_name", 400)
        if not isinstance(code, str) or not ISO_639_1.fullmatch(code):
            raise FunctionError(
                'Invalid language code format. Use ISO 639-1 (e.g., "en", "fr")', 400
            )

        language = self.repository.add_language(
            code, name, payload.get("script_direction", "ltr")
        )

        yachtie = next(
            (
                p
                for p in self.repository.active_providers()
                if p.get("provider_type") == "yachtie"
            ),
            None,
        )
        if yachtie is not None:
            current = list(yachtie.get("supported_languages") or [])
            if code not in current:
                self.repository.update_provider_languages(yachtie["id"], [*current, code])

        return {
            "success": True,
            "language": language,
            "message": f"Language {name} ({code}) added successfully",
        }

    def run_inference(self, payload: dict[str, Any]) -> dict[str, Any]:
        task = payload.get("task") or "infer"
        language = payload.get("language") or "en"
        model = payload.get("model") or YACHTIE_MODEL
        result = self.engine.run(
            task,
            text=payload.get("text"),
            language=language,
            target_language=payload.get("targetLanguage"),
        )

        self.repository.log_inference(
            {
                "request_type": task,
                "model_id": model,
                "prompt": payload.get("text"),
                "response": result.get("text") or json.dumps(result),
                "status": "success",
                "tokens_used": result["tokens_used"],
                "latency_ms": result["processing_time_ms"],
                "metadata": {
                    "language": payload.get("language"),
                    "targetLanguage": payload.get("targetLanguage"),
                    "task": payload.get("task"),
                },
            }
        )
        return {
            "success": True,
            "result": result,
            "metadata": {
                "model_used": model,
                "language_used": language,
                "task_type": task,
            },
        }

    def update_provider_config(self, payload: dict[str, Any]) -> dict[str, Any]:
        provider_id = payload.get("provider_id")
        config = payload.get("config")
        if not provider_id or not config:
            raise FunctionError("Missing provider_id or config", 400)
        provider = self.repository.update_provider_config(provider_id, config)
        return {
            "success": True,
            "provider": provider,
            "message": "Provider configuration updated successfully",
        }
