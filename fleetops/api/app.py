"""FastAPI application exposing the fleet backend functions.

Each ``/functions/...`` route mirrors one serverless function of the
web app. Warranty extraction, certificate mapping and the AI assistants
are open; the admin API needs a superadmin, and the dashboard and workflow
routes need a signed-in user.
"""

import base64
import binascii
import shutil
import uuid
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Any

from fastapi import FastAPI, File, Header, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fleetops.ai.consensus import FALLBACK_MESSAGE, UnifiedAssistant
from fleetops.ai.providers import ChatProvider, SpeechClient
from fleetops.ai.warranty_ai import WarrantyAIExtractor
from fleetops.ai.yachtie import YachtieService
from fleetops.dashboards.compliance import summarize_compliance
from fleetops.dashboards.inventory import summarize_inventory
from fleetops.dashboards.maintenance import maintenance_schedule
from fleetops.dashboards.warranty import validate_warranty
from fleetops.db.repository import FleetRepository
from fleetops.documents.text_reader import DocumentTextReader
from fleetops.errors import DocumentReadError, FunctionError, RepositoryError
from fleetops.extraction.warranty import extract_yacht_fields
from fleetops.mapping.document_ai import DocumentAIProcessor
from fleetops.mapping.field_mappings import FieldMappingSet
from fleetops.mapping.onboarding import ExtractedFieldData, OnboardingMappingService
from fleetops.mapping.yacht_mapper import GoogleDocumentAIYachtMapper
from fleetops.utils.config import AppConfig, load_config
from fleetops.utils.logger import get_logger

from .auth import fetch_user, is_superadmin
from .schemas import (
    CapabilityResponse,
    DocumentAIMapRequest,
    DocumentAIMapResponse,
    FleetDashboardResponse,
    FunctionRequest,
    HealthResponse,
    OnboardingMapRequest,
    OnboardingMapResponse,
    VoiceProcessRequest,
    VoiceProcessResponse,
    VoiceRequest,
    VoiceResponse,
    WarrantyExtractionResponse,
    WarrantyValidateRequest,
    WarrantyValidateResponse,
    WorkflowStatusRequest,
)

logger = get_logger(__name__)

VERSION = "1.0.0"

VOICE_TYPES = frozenset({"speech-to-text", "text-to-speech"})
WORKFLOW_STATUSES = frozenset({"pending", "running", "completed", "failed"})

app = FastAPI(
    title="Fleet Operations API",
    description="Document mapping, warranty extraction and AI functions for yacht fleets",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> AppConfig:
    return load_config()


def _get_reader(config: AppConfig) -> DocumentTextReader:
    return DocumentTextReader(config)


def _get_warranty_extractor(config: AppConfig) -> WarrantyAIExtractor:
    return WarrantyAIExtractor(ChatProvider.from_config("openai", config.ai))


def _get_repository(config: AppConfig) -> FleetRepository:
    return FleetRepository.from_config(config.database)


def _get_assistant(config: AppConfig) -> UnifiedAssistant:
    return UnifiedAssistant(config.ai)


def _get_speech(config: AppConfig) -> SpeechClient:
    return SpeechClient(config.ai)


def _get_user(authorization: str | None, config: AppConfig) -> dict[str, Any] | None:
    return fetch_user(authorization, config.database)


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _record_error(
    config: AppConfig, message: str, module: str, context: dict[str, Any] | None = None
) -> None:
    """Store a function failure in the error log table when the database is reachable."""
    try:
        _get_repository(config).log_error(message, module, context=context)
    except RepositoryError as exc:
        logger.warning("Could not record %s error: %s", module, exc)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return service health."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/functions/extract-warranty-data", response_model=CapabilityResponse)
async def warranty_capabilities() -> CapabilityResponse:
    return CapabilityResponse(
        function="extract-warranty-data",
        capabilities=["pdf", "image", "text"],
        time=_now(),
    )


@app.post("/functions/extract-warranty-data", response_model=WarrantyExtractionResponse)
async def extract_warranty_data(
    document: Annotated[UploadFile | None, File()] = None,
) -> WarrantyExtractionResponse | JSONResponse:
    """Read an uploaded warranty document and extract warranty and yacht data.

    Args:
        document: PDF, image or text upload.

    Returns:
        Extracted warranty and yacht fields, or an error body.
    """
    try:
        if document is None:
            raise FunctionError("No document provided", status_code=400)

        config = _get_config()
        content = await document.read()
        content_type = document.content_type or ""
        logger.info(
            "Processing document: %s %s %d", document.filename, content_type, len(content)
        )

        read = _get_reader(config).read(content, content_type, document.filename or "document")
        warranty_data = _get_warranty_extractor(config).extract(read.text)
        yacht_data = extract_yacht_fields(read.text)

        return WarrantyExtractionResponse(
            success=True,
            warranty_data=warranty_data,
            yacht_data=yacht_data,
            extracted_text_length=len(read.text),
            document_type=content_type,
        )

    except Exception as exc:
        logger.error("extract-warranty-data error: %s", exc)
        if isinstance(exc, FunctionError):
            status = exc.status_code
        elif isinstance(exc, DocumentReadError):
            status = 400
        else:
            status = 500
            _record_error(
                _get_config(),
                str(exc),
                "extract-warranty-data",
                {"filename": document.filename if document else None},
            )
        return JSONResponse(
            status_code=status,
            content={
                "error": {
                    "message": str(exc),
                    "code": "WARRANTY_EXTRACTION_ERROR",
                    "function": "extract-warranty-data",
                    "request_id": str(uuid.uuid4()),
                    "timestamp": _now(),
                }
            },
        )


@app.post("/functions/yachtie-multi-ai")
async def yachtie_multi_ai(
    request: FunctionRequest,
    authorization: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    """Superadmin-only AI provider, model and language administration."""
    config = _get_config()
    try:
        if not is_superadmin(_get_user(authorization, config)):
            return JSONResponse(
                status_code=403,
                content={"error": "Unauthorized - Superadmin access required"},
            )
        service = YachtieService(_get_repository(config))
        return JSONResponse(content=service.dispatch(request.action, request.payload))
    except FunctionError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})
    except Exception as exc:
        logger.error("yachtie-multi-ai error: %s", exc)
        _record_error(config, str(exc), "yachtie-multi-ai", {"action": request.action})
        return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/functions/unified-voice-ai", response_model=CapabilityResponse)
async def voice_capabilities() -> CapabilityResponse:
    return CapabilityResponse(function="unified-voice-ai", time=_now())


@app.post("/functions/unified-voice-ai", response_model=VoiceResponse)
async def unified_voice_ai(request: VoiceRequest) -> VoiceResponse | JSONResponse:
    """Answer a prompt with Grok and cross-check it with other providers."""
    logger.info("Unified AI processing: %s - %.80s", request.action, request.prompt)
    config = _get_config()
    try:
        result = _get_assistant(config).ask(request.prompt, request.context)
    except Exception as exc:
        logger.error("Unified Voice AI error: %s", exc)
        _record_error(config, str(exc), "unified-voice-ai", {"action": request.action})
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(exc), "fallback": FALLBACK_MESSAGE},
        )

    return VoiceResponse(
        primary=asdict(result.primary),
        verification=[asdict(v) for v in result.verification],
        consensus=result.consensus,
        confidence=result.confidence,
        verified=result.verified,
        timestamp=_now(),
    )


@app.get("/functions/voice-processor", response_model=CapabilityResponse)
async def voice_processor_capabilities() -> CapabilityResponse:
    return CapabilityResponse(
        function="voice-processor",
        capabilities=sorted(VOICE_TYPES),
        time=_now(),
    )


@app.post(
    "/functions/voice-processor",
    response_model=VoiceProcessResponse,
    response_model_exclude_none=True,
)
async def voice_processor(request: VoiceProcessRequest) -> VoiceProcessResponse | JSONResponse:
    """Transcribe base64 audio, or render text as base64 MP3 speech."""
    logger.info("Processing voice request: %s", request.type)
    config = _get_config()
    language = request.language or "en-US"
    try:
        if request.type not in VOICE_TYPES:
            raise FunctionError(f"Unsupported voice request type: {request.type}", 400)
        speech = _get_speech(config)
        if request.type == "speech-to-text":
            try:
                audio = base64.b64decode(request.content, validate=True)
            except binascii.Error as exc:
                raise FunctionError("Audio content is not valid base64", 400) from exc
            return VoiceProcessResponse(
                text=speech.transcribe(audio), language_detected=language
            )
        audio = speech.synthesize(request.content, request.voice)
        return VoiceProcessResponse(
            audio_content=base64.b64encode(audio).decode("ascii"),
            language_detected=language,
        )
    except Exception as exc:
        logger.error("voice-processor error: %s", exc)
        status = exc.status_code if isinstance(exc, FunctionError) else 500
        return JSONResponse(status_code=status, content={"success": False, "error": str(exc)})


@app.post("/functions/document-ai-map", response_model=DocumentAIMapResponse)
async def document_ai_map(request: DocumentAIMapRequest) -> DocumentAIMapResponse:
    """Map Document AI certificate fields to yacht profile fields.

    ``profile_fields`` is the same input run through the configured
    mapping profile.
    """
    config = _get_config()
    processed = DocumentAIProcessor().process(request.fields)
    sections = GoogleDocumentAIYachtMapper().map_fields(request.fields)
    profile = FieldMappingSet(Path(config.mapping.field_mappings_path))
    return DocumentAIMapResponse(
        processed=processed,
        profile_fields=profile.apply(request.fields),
        basic_info=sections.basic_info,
        specifications=sections.specifications,
        field_count=sections.field_count,
    )


@app.post("/functions/onboarding-map", response_model=OnboardingMapResponse)
async def onboarding_map(
    request: OnboardingMapRequest,
) -> OnboardingMapResponse | JSONResponse:
    """Populate the onboarding form from reviewed scan fields."""
    config = _get_config()
    service = OnboardingMappingService(config.mapping)
    extracted = [ExtractedFieldData(**f.model_dump()) for f in request.extracted_fields]
    result = service.apply_mappings(extracted, request.mappings)
    validation = service.validate(result.yacht_data)

    profile = None
    if request.save and result.success:
        record = dict(result.yacht_data)
        if request.profile_id:
            record["id"] = request.profile_id
        try:
            profile = _get_repository(config).save_yacht_profile(record)
        except RepositoryError as exc:
            logger.error("onboarding-map error: %s", exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})

    return OnboardingMapResponse(
        **asdict(result),
        completion_percentage=service.completion_percentage(result.populated_fields),
        warnings=validation.warnings,
        profile=profile,
    )


@app.post("/functions/validate-warranty", response_model=WarrantyValidateResponse)
async def validate_warranty_endpoint(
    request: WarrantyValidateRequest,
) -> WarrantyValidateResponse:
    config = _get_config()
    status = validate_warranty(
        request.start_date,
        request.duration_months,
        request.manufacturer,
        expiring_days=config.dashboards.warranty_expiring_days,
    )
    return WarrantyValidateResponse(**asdict(status))


@app.get("/functions/fleet-dashboard/{yacht_id}", response_model=FleetDashboardResponse)
async def fleet_dashboard(
    yacht_id: str,
    authorization: Annotated[str | None, Header()] = None,
) -> FleetDashboardResponse | JSONResponse:
    """Inventory, compliance and maintenance figures for one yacht."""
    config = _get_config()
    if _get_user(authorization, config) is None:
        return JSONResponse(status_code=401, content={"error": "Authentication required"})
    try:
        repository = _get_repository(config)
        items = repository.yacht_rows("inventory_items", yacht_id)
        requirements = repository.yacht_rows("compliance_requirements", yacht_id)
        equipment = repository.yacht_rows("equipment", yacht_id)
    except RepositoryError as exc:
        logger.error("fleet-dashboard error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    inventory = summarize_inventory(items)
    return FleetDashboardResponse(
        yacht_id=yacht_id,
        inventory={
            **asdict(inventory),
            "low_stock_count": inventory.low_stock_count,
            "critical_alerts": inventory.critical_alerts,
        },
        compliance=asdict(
            summarize_compliance(
                requirements, due_soon_days=config.dashboards.compliance_due_soon_days
            )
        ),
        maintenance=asdict(
            maintenance_schedule(
                equipment, upcoming_days=config.dashboards.maintenance_upcoming_days
            )
        ),
    )


@app.post("/functions/workflow-status")
async def workflow_status(
    request: WorkflowStatusRequest,
    authorization: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    """Record the status of a workflow run."""
    config = _get_config()
    if _get_user(authorization, config) is None:
        return JSONResponse(status_code=401, content={"error": "Authentication required"})
    if request.status not in WORKFLOW_STATUSES:
        return JSONResponse(
            status_code=400, content={"error": f"Unknown workflow status: {request.status}"}
        )
    try:
        row = _get_repository(config).record_workflow_execution(
            request.workflow_id, request.status, request.result, request.error
        )
    except RepositoryError as exc:
        logger.error("workflow-status error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(content={"success": True, "execution": row})
