"""Tests for direct Document AI field processing."""

from fleetops.mapping.document_ai import (
    DIRECT_FIELD_MAPPING,
    DOCUMENT_AI_FIELDS,
    DocumentAIProcessor,
)


class TestFieldTables:
    def test_every_field_has_a_mapping(self) -> None:
        assert set(DOCUMENT_AI_FIELDS) == set(DIRECT_FIELD_MAPPING)

    def test_targets_are_snake_case(self) -> None:
        for target in DIRECT_FIELD_MAPPING.values():
            assert target == target.lower()
            assert " " not in target


class TestDocumentAIProcessor:
    """Tests for DocumentAIProcessor.process."""

    def setup_method(self) -> None:
        self.processor = DocumentAIProcessor()

    def test_certificate_number_kept_as_text(self) -> None:
        result = self.processor.process({"Certificate_No": "1100002"})
        assert result == {"certificate_number": "1100002"}

    def test_written_date_formatted(self) -> None:
        result = self.processor.process({"Certificate_issued_this": "10 December 2020"})
        assert result["certificate_issued_date"] == "10-12-2020"

    def test_combined_kw_power(self) -> None:
        result = self.processor.process({"Propulsion_Power": "Combined KW 2864"})
        assert result["engine_power"] == 2864

    def test_dimensions_numeric(self) -> None:
        result = self.processor.process(
            {"Length_overall": "28.06 m", "Main_breadth": "6.55", "Depth": "3.1"}
        )
        assert result == {"length_overall": 28.06, "beam": 6.55, "draft": 3.1}

    def test_engine_year_is_int(self) -> None:
        assert self.processor.process({"Engines_Year_of_Make": "2018"}) == {
            "engine_year": 2018
        }

    def test_numeric_field_without_number_keeps_text(self) -> None:
        result = self.processor.process({"Length_overall": " unknown "})
        assert result["length_overall"] == "unknown"

    def test_official_number_keeps_leading_zeros(self) -> None:
        assert self.processor.process({"OfficialNo": "007123"}) == {
            "official_number": "007123"
        }

    def test_empty_values_skipped(self) -> None:
        result = self.processor.process({"Callsign": "", "Home_Port": None})
        assert result == {}

    def test_unmapped_field_keeps_name(self) -> None:
        result = self.processor.process({"Custom_Label": "  value  "})
        assert result == {"Custom_Label": "value"}

    def test_non_string_values_pass_through(self) -> None:
        result = self.processor.process({"Length_overall": 28.06})
        assert result["length_overall"] == 28.06

    def test_full_certificate(self, certificate_fields: dict[str, str]) -> None:
        result = self.processor.process(certificate_fields)
        assert len(result) == len(certificate_fields)
        assert result["name"] == "BLUE INFINITY ONE"
        assert result["imo_number"] == "9074729"
        assert result["engine_power"] == 2864
        assert result["certificate_expires_date"] == "01-07-2026"

    def test_custom_mapping(self) -> None:
        processor = DocumentAIProcessor({"Callsign": "radio_call_sign"})
        assert processor.process({"Callsign": "9HB9361"}) == {
            "radio_call_sign": "9HB9361"
        }
