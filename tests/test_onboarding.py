"""Tests for populating the onboarding form from scanned fields."""

from fleetops.mapping.onboarding import ExtractedFieldData, OnboardingMappingService
from fleetops.mapping.yacht_mapper import GoogleDocumentAIYachtMapper
from fleetops.validation.rules_engine import REQUIRED_ONBOARDING_FIELDS


def _field(
    field_id: str, value: str, confidence: float = 0.95, edited: str | None = None
) -> ExtractedFieldData:
    return ExtractedFieldData(
        id=field_id, name=field_id, value=value, confidence=confidence, edited_value=edited
    )


def _complete_record() -> dict:
    return {
        "vessel_name": "BLUE INFINITY ONE",
        "official_number": "22106",
        "home_port": "VALLETTA",
        "flag_state": "Malta",
        "length_overall": 28.06,
        "beam": 6.55,
        "owner_name": "Blue Infinity",
        "owner_address": "12 Triq Il-Bajjada",
        "certificate_number": "1100002",
        "certificate_issued_date": "10-12-2020",
        "registration_date": "10-12-2020",
    }


class TestApplyMappings:
    """Tests for OnboardingMappingService.apply_mappings."""

    def setup_method(self) -> None:
        self.service = OnboardingMappingService()

    def test_value_processing(self) -> None:
        result = self.service.apply_mappings(
            [
                _field("f1", " blue infinity one "),
                _field("f2", "jOHN smith"),
                _field("f3", "28.06 m"),
                _field("f4", "10/12/2020"),
                _field("f5", "10 December 2020"),
            ],
            {
                "f1": "vessel_name",
                "f2": "owner_name",
                "f3": "length_overall",
                "f4": "certificate_issued_date",
                "f5": "registration_date",
            },
        )
        assert result.success is True
        assert result.yacht_data == {
            "vessel_name": "BLUE INFINITY ONE",
            "owner_name": "John Smith",
            "length_overall": 28.06,
            "certificate_issued_date": "10-12-2020",
            "registration_date": "10-12-2020",
        }

    def test_edited_value_wins(self) -> None:
        result = self.service.apply_mappings(
            [_field("f1", "STRAK", edited="STARK")], {"f1": "vessel_name"}
        )
        assert result.yacht_data["vessel_name"] == "STARK"

    def test_numeric_targets(self) -> None:
        result = self.service.apply_mappings(
            [_field("f1", "2019"), _field("f2", "unknown")],
            {"f1": "year_built", "f2": "gross_tonnage"},
        )
        assert result.yacht_data["year_built"] == 2019.0
        assert result.yacht_data["gross_tonnage"] is None

    def test_numeric_prefix_ignores_trailing_text(self) -> None:
        result = self.service.apply_mappings(
            [_field("f1", "499.00 GT."), _field("f2", "-"), _field("f3", "1,250.5 kW")],
            {"f1": "gross_tonnage", "f2": "net_tonnage", "f3": "engine_power"},
        )
        assert result.yacht_data["gross_tonnage"] == 499.0
        assert result.yacht_data["net_tonnage"] is None
        assert result.yacht_data["engine_power"] == 1250.5

    def test_unknown_field_id_skipped(self) -> None:
        result = self.service.apply_mappings([], {"missing": "vessel_name"})
        assert result.populated_fields == []
        assert result.data_quality.total_fields == 1

    def test_data_quality_and_suggestions(self) -> None:
        result = self.service.apply_mappings(
            [
                _field("f1", "STARK", 0.95),
                _field("f2", "22106", 0.8),
                _field("f3", "6.55", 0.5),
            ],
            {"f1": "vessel_name", "f2": "official_number", "f3": "beam"},
        )
        quality = result.data_quality
        assert quality.populated_fields == 3
        assert quality.high_confidence == 1
        assert quality.low_confidence == 1

        verify = result.suggestions[0]
        assert verify.field == "beam"
        assert verify.suggestion == 'Verify beam value: "6.55"'
        assert verify.reason == "Low confidence (50%)"

        general = result.suggestions[-1]
        assert general.field == "general"
        assert general.suggestion == "8 required fields are missing"

    def test_missing_required_fields(self) -> None:
        result = self.service.apply_mappings(
            [_field("f1", "STARK")], {"f1": "vessel_name"}
        )
        assert "vessel_name" not in result.missing_required_fields
        assert len(result.missing_required_fields) == len(REQUIRED_ONBOARDING_FIELDS) - 1

    def test_bad_value_type_reports_failure(self) -> None:
        bad = ExtractedFieldData(id="f1", name="x", value=None, confidence=0.9)
        result = self.service.apply_mappings([bad], {"f1": "vessel_name"})
        assert result.success is False
        assert result.suggestions[0].field == "error"
        assert result.missing_required_fields == REQUIRED_ONBOARDING_FIELDS


class TestCompletionAndCategories:
    def setup_method(self) -> None:
        self.service = OnboardingMappingService()

    def test_completion_percentage(self) -> None:
        assert self.service.completion_percentage([]) == 0
        assert self.service.completion_percentage(list(REQUIRED_ONBOARDING_FIELDS)) == 100
        assert self.service.completion_percentage(REQUIRED_ONBOARDING_FIELDS[:5]) == 45

    def test_extra_fields_do_not_count(self) -> None:
        assert self.service.completion_percentage(["mmsi", "draft"]) == 0

    def test_field_category(self) -> None:
        assert self.service.field_category("beam") == "specifications"
        assert self.service.field_category("owner_name") == "owner"
        assert self.service.field_category("certificate_number") == "certificate"
        assert self.service.field_category("call_sign") == "basic"
        assert self.service.field_category("something_else") == "basic"


class TestValidate:
    def setup_method(self) -> None:
        self.service = OnboardingMappingService()

    def test_complete_record_is_valid(self) -> None:
        validation = self.service.validate(_complete_record())
        assert validation.is_valid is True
        assert validation.missing_fields == []
        assert validation.warnings == []

    def test_missing_fields_reported(self) -> None:
        record = _complete_record()
        del record["beam"]
        record["owner_address"] = "  "
        validation = self.service.validate(record)
        assert validation.is_valid is False
        assert validation.missing_fields == ["beam", "owner_address"]

    def test_small_length_is_a_warning(self) -> None:
        record = {**_complete_record(), "length_overall": 0.5}
        validation = self.service.validate(record)
        assert validation.is_valid is True
        assert "Length overall seems too small" in validation.warnings

    def test_odd_build_year_is_a_warning(self) -> None:
        record = {**_complete_record(), "year_built": 1850}
        validation = self.service.validate(record)
        assert validation.is_valid is True
        assert "Year built seems incorrect" in validation.warnings

    def test_zero_length_counts_as_missing(self) -> None:
        validation = self.service.validate({**_complete_record(), "length_overall": 0.0})
        assert validation.is_valid is False
        assert validation.missing_fields == ["length_overall"]

    def test_identifier_problems_only_warn(self) -> None:
        record = {**_complete_record(), "mmsi": "2151", "beam": "wide"}
        validation = self.service.validate(record)
        assert validation.is_valid is True
        assert validation.missing_fields == []
        assert "Invalid MMSI: 2151" in validation.warnings
        assert "Invalid number: wide" in validation.warnings


class TestValidateMappedCertificate:
    def test_hull_identification_number_is_valid(
        self, certificate_fields: dict[str, str]
    ) -> None:
        fields = {**certificate_fields, "HULL_ID": "GB-SNK12345A919"}
        record = GoogleDocumentAIYachtMapper().map_fields(fields).onboarding_record()

        validation = OnboardingMappingService().validate(record)

        assert record["imo_number"] == "GB-SNK12345A919"
        assert validation.is_valid is True
        assert validation.missing_fields == []
