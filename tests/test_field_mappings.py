"""Tests for configurable field mapping profiles."""

from pathlib import Path

import yaml

from fleetops.mapping.field_mappings import (
    DEFAULT_FIELD_MAPPINGS,
    FieldMapping,
    FieldMappingSet,
)


def _by_id(mapping_id: str) -> FieldMapping:
    return next(m for m in DEFAULT_FIELD_MAPPINGS if m.id == mapping_id)


class TestFieldMappingConvert:
    """Tests for per-type value conversion."""

    def test_combined_kw_regex(self) -> None:
        mapping = _by_id("combined_kw_mapping")
        assert mapping.convert("Combined KW 2944") == 2944.0
        assert mapping.convert("2864") == 2864.0
        assert mapping.convert("3200 KW") == 3200.0

    def test_number_with_units(self) -> None:
        assert _by_id("length_overall_mapping").convert("45.5 m") == 45.5

    def test_number_without_match_is_zero(self) -> None:
        assert _by_id("beam_mapping").convert("n/a") == 0.0

    def test_number_without_validation(self) -> None:
        mapping = FieldMapping("x", "src", "dst", field_type="number")
        assert mapping.convert("about 12.5 tons") == 12.5

    def test_date_format(self) -> None:
        mapping = _by_id("certificate_issued_date_mapping")
        assert mapping.convert("10 December 2020") == "10-12-2020"
        assert mapping.convert("July 2026") == "01-07-2026"

    def test_boolean(self) -> None:
        mapping = FieldMapping("x", "src", "dst", field_type="boolean")
        assert mapping.convert("Yes") is True
        assert mapping.convert("no") is False

    def test_text_is_stripped(self) -> None:
        assert _by_id("call_sign_mapping").convert("  9HB9361 ") == "9HB9361"

    def test_none_stays_none(self) -> None:
        assert _by_id("name_mapping").convert(None) is None


class TestFieldMappingSet:
    def setup_method(self) -> None:
        self.mapping_set = FieldMappingSet(Path("/nonexistent/field_mappings.yaml"))

    def test_defaults_loaded(self) -> None:
        assert len(self.mapping_set.mappings) == len(DEFAULT_FIELD_MAPPINGS)

    def test_defaults_are_copies(self) -> None:
        self.mapping_set.mappings[0].is_active = False
        assert DEFAULT_FIELD_MAPPINGS[0].is_active is True

    def test_runtime_mapping_skips_inactive(self) -> None:
        assert self.mapping_set.runtime_mapping()["Callsign"] == "call_sign"
        self.mapping_set.upsert(
            FieldMapping("call_sign_mapping", "Callsign", "call_sign", is_active=False)
        )
        assert "Callsign" not in self.mapping_set.runtime_mapping()

    def test_apply_converts_values(self) -> None:
        result = self.mapping_set.apply(
            {
                "Callsign": "9HB9361",
                "Length_overall": "28.06",
                "Propulsion_Power": "Combined KW 2864",
                "Certificate_issued_this": "10 December 2020",
            }
        )
        assert result == {
            "call_sign": "9HB9361",
            "length_overall": 28.06,
            "engine_power": 2864.0,
            "certificate_issued_date": "10-12-2020",
        }

    def test_apply_prefers_higher_confidence(self) -> None:
        result = self.mapping_set.apply({"Name_o_fShip": "OTHER", "name": "STARK"})
        assert result["yacht_name"] == "STARK"

    def test_apply_skips_empty_values(self) -> None:
        assert self.mapping_set.apply({"Callsign": ""}) == {}

    def test_upsert_adds_new(self) -> None:
        count = len(self.mapping_set.mappings)
        self.mapping_set.upsert(FieldMapping("mmsi_mapping", "MMSI", "mmsi"))
        assert len(self.mapping_set.mappings) == count + 1

    def test_remove(self) -> None:
        assert self.mapping_set.remove("beam_mapping") is True
        assert self.mapping_set.remove("beam_mapping") is False

    def test_save_and_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "presets" / "mappings.yaml"
        self.mapping_set.upsert(FieldMapping("mmsi_mapping", "MMSI", "mmsi"))
        self.mapping_set.save(path)

        data = yaml.safe_load(path.read_text())
        assert data["mappings"][-1]["id"] == "mmsi_mapping"

        reloaded = FieldMappingSet(path)
        assert reloaded.runtime_mapping()["MMSI"] == "mmsi"

    def test_yaml_profile(self, tmp_path: Path) -> None:
        path = tmp_path / "mappings.yaml"
        path.write_text(
            yaml.dump(
                {
                    "mappings": [
                        {"id": "a", "source_field": "Callsign", "target_field": "cs"}
                    ]
                }
            )
        )
        assert FieldMappingSet(path).runtime_mapping() == {"Callsign": "cs"}


class TestMappingSampleRun:
    def test_examples_run_through_conversion(self) -> None:
        results = FieldMappingSet.test_mapping(_by_id("combined_kw_mapping"))
        assert [r.output for r in results] == [2944.0, 2864.0, 3200.0]
        assert all(r.valid for r in results)

    def test_no_examples_uses_placeholder(self) -> None:
        results = FieldMappingSet.test_mapping(FieldMapping("x", "a", "b"))
        assert results[0].input == "Sample Value"
        assert results[0].output == "Sample Value"

    def test_bad_pattern_is_invalid(self) -> None:
        mapping = FieldMapping(
            "x", "a", "b", field_type="number", validation="([", examples=["1"]
        )
        results = FieldMappingSet.test_mapping(mapping)
        assert results[0].valid is False
        assert results[0].output is None
