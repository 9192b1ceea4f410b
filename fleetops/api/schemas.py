"""Pydantic request/response schemas for the function endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    status: str
    version: str
    tesseract_available: bool


class CapabilityResponse(BaseModel):
    """Answer to a GET health check of a function endpoint."""

    status: str = "ok"
    function: str
    capabilities: list[str] | None = None
    time: str


class WarrantyExtractionResponse(BaseModel):
    success: bool
    warranty_data: dict[str, Any]
    yacht_data: dict[str, Any]
    extracted_text_length: int
    document_type: str


class FunctionRequest(BaseModel):
    """An ``{action, payload}`` call to an admin function."""

    action: str
    payload: dict[str, Any] = Field(default_factory=dict)


class VoiceRequest(BaseModel):
    prompt: str
    context: str = "yacht management assistant"
    action: str = "chat"


class AIAnswer(BaseModel):
    provider: str
    response: str
    confidence: float
    reasoning: str = ""


class VoiceResponse(BaseModel):
    success: bool = True
    primary: AIAnswer
    verification: list[AIAnswer]
    consensus: str
    confidence: float
    verified: bool
    timestamp: str


class DocumentAIMapRequest(BaseModel):
    """Flat label/value pairs read by Document AI from a certificate."""

    fields: dict[str, Any]


class DocumentAIMapResponse(BaseModel):
    processed: dict[str, Any]
    profile_fields: dict[str, Any] = Field(default_factory=dict)
    basic_info: dict[str, Any]
    specifications: dict[str, Any]
    field_count: int


class ExtractedFieldSchema(BaseModel):
    id: str
    name: str
    value: str
    confidence: float
    type: str = "text"
    edited_value: str | None = None


class OnboardingMapRequest(BaseModel):
    """Reviewed scan fields; ``save`` also stores the result as a yacht profile."""

    extracted_fields: list[ExtractedFieldSchema]
    mappings: dict[str, str]
    save: bool = False
    profile_id: str | None = None


class SuggestionSchema(BaseModel):
    field: str
    suggestion: str
    reason: str


class DataQualitySchema(BaseModel):
    total_fields: int
    populated_fields: int
    high_confidence: int
    low_confidence: int


class OnboardingMapResponse(BaseModel):
    success: bool
    populated_fields: list[str]
    missing_required_fields: list[str]
    data_quality: DataQualitySchema
    yacht_data: dict[str, Any]
    suggestions: list[SuggestionSchema]
    completion_percentage: int
    warnings: list[str] = Field(default_factory=list)
    profile: dict[str, Any] | None = None


class WarrantyValidateRequest(BaseModel):
    start_date: str | None = None
    duration_months: int | None = None
    manufacturer: str | None = None


class WarrantyValidateResponse(BaseModel):
    is_valid: bool
    status: str
    days_remaining: int | None = None
    expiry_date: str | None = None
    coverage_details: dict[str, bool] = Field(default_factory=dict)
    manufacturer_contact: dict[str, str] = Field(default_factory=dict)
    claim_requirements: list[str] = Field(default_factory=list)
    recommended_actions: list[str] = Field(default_factory=list)


class VoiceProcessRequest(BaseModel):
    """Speech-to-text (base64 audio) or text-to-speech (plain text) request."""

    type: str
    content: str
    voice: str = "alloy"
    language: str | None = None


class VoiceProcessResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    text: str | None = None
    audio_content: str | None = Field(default=None, alias="audioContent")
    language_detected: str


class WorkflowStatusRequest(BaseModel):
    workflow_id: str
    status: str
    result: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class FleetDashboardResponse(BaseModel):
    yacht_id: str
    inventory: dict[str, Any]
    compliance: dict[str, Any]
    maintenance: dict[str, Any]
