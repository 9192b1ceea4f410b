"""Populate the yacht onboarding form from scanned certificate fields.

Takes the fields a user confirmed (and possibly edited) in the scan review
screen, applies the user's field-to-form mapping, and reports how complete
and how trustworthy the resulting onboarding record is.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fleetops.utils.config import MappingConfig
from fleetops.utils.logger import get_logger
from fleetops.validation.rules_engine import REQUIRED_ONBOARDING_FIELDS, RulesEngine

from .normalizers import (
    extract_amount_text,
    format_date_dd_mm_yyyy,
    normalize_numeric_date,
    title_case_name,
)

logger = get_logger(__name__)

NUMERIC_FIELDS = frozenset(
    {
        "length_overall",
        "beam",
        "draft",
        "gross_tonnage",
        "net_tonnage",
        "engine_power",
        "year_built",
    }
)
DATE_FIELDS = frozenset(
    {"certificate_issued_date", "certificate_expiry_date", "registration_date"}
)
DIMENSION_FIELDS = frozenset({"length_overall", "beam", "draft"})

# Leading number of a digits-dots-dashes string; trailing junk is ignored.
_NUMBER_PREFIX = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")

_FIELD_CATEGORIES: dict[str, frozenset[str]] = {
    "basic": frozenset(
        {
            "vessel_name",
            "call_sign",
            "mmsi",
            "imo_number",
            "official_number",
            "home_port",
            "flag_state",
            "vessel_type",
        }
    ),
    "specifications": frozenset(
        {
            "length_overall",
            "beam",
            "draft",
            "gross_tonnage",
            "net_tonnage",
            "engine_power",
            "engine_maker",
            "propulsion_type",
            "fuel_type",
            "year_built",
            "builder",
            "hull_material",
            "classification_society",
        }
    ),
    "owner": frozenset({"owner_name", "owner_address", "owner_type"}),
    "certificate": frozenset(
        {
            "certificate_number",
            "certificate_issued_date",
            "certificate_expiry_date",
            "registration_date",
        }
    ),
}


@dataclass
class ExtractedFieldData:
    """A field read from a scanned document, as reviewed by the user."""

    id: str
    name: str
    value: str
    confidence: float
    type: str = "text"
    edited_value: str | None = None


@dataclass
class MappingSuggestion:
    field: str
    suggestion: str
    reason: str


@dataclass
class DataQuality:
    total_fields: int = 0
    populated_fields: int = 0
    high_confidence: int = 0
    low_confidence: int = 0


@dataclass
class MappingIntegrationResult:
    """Outcome of populating an onboarding record from scanned fields."""

    success: bool
    populated_fields: list[str]
    missing_required_fields: list[str]
    data_quality: DataQuality
    yacht_data: dict[str, Any]
    suggestions: list[MappingSuggestion] = field(default_factory=list)


@dataclass
class OnboardingValidation:
    is_valid: bool
    missing_fields: list[str]
    warnings: list[str]


class OnboardingMappingService:
    """Applies scan-to-form mappings and checks onboarding completeness.

    Args:
        config: Confidence thresholds and rules file location.
        rules_engine: Validation engine; built from ``config`` if omitted.
    """

    def __init__(
        self,
        config: MappingConfig | None = None,
        rules_engine: RulesEngine | None = None,
    ) -> None:
        self.config = config or MappingConfig()
        self.rules_engine = rules_engine or RulesEngine(Path(self.config.rules_path))
        self.required_fields = list(REQUIRED_ONBOARDING_FIELDS)

    def apply_mappings(
        self,
        extracted_fields: list[ExtractedFieldData],
        mappings: dict[str, str],
    ) -> MappingIntegrationResult:
        """Populate onboarding data from extracted fields.

        Args:
            extracted_fields: Fields read from the document.
            mappings: Extracted field id to onboarding field name.

        Returns:
            Populated data with quality statistics and review suggestions.
        """
        by_id = {f.id: f for f in extracted_fields}
        yacht_data: dict[str, Any] = {}
        populated: list[str] = []
        suggestions: list[MappingSuggestion] = []
        quality = DataQuality(total_fields=len(mappings))

        try:
            for field_id, target in mappings.items():
                extracted = by_id.get(field_id)
                if extracted is None:
                    continue

                processed = self._process_value(extracted, target)
                yacht_data[target] = self._convert_value(processed, target)
                populated.append(target)

                if extracted.confidence >= self.config.high_confidence:
                    quality.high_confidence += 1
                elif extracted.confidence < self.config.low_confidence:
                    quality.low_confidence += 1
                    suggestions.append(
                        MappingSuggestion(
                            field=target,
                            suggestion=f'Verify {target} value: "{processed}"',
                            reason=f"Low confidence ({round(extracted.confidence * 100)}%)",
                        )
                    )
        except (AttributeError, TypeError) as exc:
            logger.error("Failed to apply mappings to yacht onboarding: %s", exc)
            return MappingIntegrationResult(
                success=False,
                populated_fields=[],
                missing_required_fields=list(self.required_fields),
                data_quality=DataQuality(),
                yacht_data={},
                suggestions=[
                    MappingSuggestion(
                        field="error",
                        suggestion="Failed to process mappings",
                        reason=str(exc),
                    )
                ],
            )

        missing = [f for f in self.required_fields if f not in populated]
        if missing:
            suggestions.append(
                MappingSuggestion(
                    field="general",
                    suggestion=f"{len(missing)} required fields are missing",
                    reason="These fields are required for yacht registration",
                )
            )

        quality.populated_fields = len(populated)
        logger.info(
            "Onboarding mapping populated %d of %d fields (%d required missing)",
            len(populated),
            len(mappings),
            len(missing),
        )
        return MappingIntegrationResult(
            success=True,
            populated_fields=populated,
            missing_required_fields=missing,
            data_quality=quality,
            yacht_data=yacht_data,
            suggestions=suggestions,
        )

    def _process_value(self, extracted: ExtractedFieldData, target: str) -> str:
        raw = extracted.edited_value or extracted.value

        if target in DATE_FIELDS:
            written = raw.strip()
            formatted = format_date_dd_mm_yyyy(written)
            if formatted != written:
                return formatted
            return normalize_numeric_date(written)
        if target == "vessel_name":
            return raw.upper().strip()
        if target == "owner_name":
            return title_case_name(raw)
        if target in DIMENSION_FIELDS:
            return extract_amount_text(raw)
        return raw.strip()

    def _convert_value(self, value: str, target: str) -> Any:
        if target in NUMERIC_FIELDS:
            cleaned = "".join(ch for ch in value if ch.isdigit() or ch in ".-")
            match = _NUMBER_PREFIX.match(cleaned)
            return float(match.group()) if match else None
        return value

    def completion_percentage(self, populated_fields: list[str]) -> int:
        """Percentage of required onboarding fields that are populated."""
        done = sum(1 for f in self.required_fields if f in populated_fields)
        return round(done / len(self.required_fields) * 100)

    @staticmethod
    def field_category(field_name: str) -> str:
        """Onboarding form section a field belongs to; ``basic`` if unknown."""
        for category, names in _FIELD_CATEGORIES.items():
            if field_name in names:
                return category
        return "basic"

    def validate(self, yacht_data: dict[str, Any]) -> OnboardingValidation:
        """Check an onboarding record for missing required fields and odd values."""
        report = self.rules_engine.validate(yacht_data, "yacht_onboarding")
        missing = [
            r.field_name
            for r in report.results
            if r.rule_name == "required" and not r.is_valid
        ]
        return OnboardingValidation(
            is_valid=not missing,
            missing_fields=missing,
            warnings=report.warnings,
        )
