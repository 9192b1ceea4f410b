"""Configurable field mapping profiles for scanned documents.

A mapping profile is an editable list of ``source field -> yacht field``
rules with a value type per rule. Profiles are stored as YAML so that an
administrator can add or disable rules without a code change, and every
rule carries example inputs that can be run through it as a quick test.
"""

import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fleetops.utils.logger import get_logger

from .normalizers import format_date_dd_mm_yyyy

logger = get_logger(__name__)

FIELD_TYPES = ("text", "number", "date", "boolean")
CATEGORIES = ("basic", "specifications", "operations", "owner", "certificate")

_TRUE_WORDS = {"true", "yes", "y", "1", "x"}


@dataclass
class FieldMapping:
    """One rule translating an extracted field into a yacht field."""

    id: str
    source_field: str
    target_field: str
    field_type: str = "text"
    category: str = "basic"
    is_active: bool = True
    confidence: float = 0.8
    validation: str | None = None
    date_format: str | None = None
    description: str = ""
    examples: list[str] = field(default_factory=list)

    def convert(self, value: Any) -> Any:
        """Convert a raw extracted value according to this rule's type.

        Numbers use the first capture group of ``validation`` when one is
        configured, otherwise the whole value; unparseable numbers become
        ``0.0``. Dates are reformatted to ``DD-MM-YYYY`` when the rule asks
        for that format.
        """
        if value is None:
            return None
        text = str(value).strip()

        if self.field_type == "number":
            if self.validation:
                match = re.match(self.validation, text)
                if not match:
                    return 0.0
                groups = [g for g in match.groups() if g]
                text = groups[-1] if groups else match.group(0)
            return _to_float(text)

        if self.field_type == "date" and self.date_format == "DD-MM-YYYY":
            return format_date_dd_mm_yyyy(text)

        if self.field_type == "boolean":
            return text.lower() in _TRUE_WORDS

        return text


@dataclass
class MappingTestResult:
    """Outcome of running one example value through a mapping."""

    input: str
    output: Any
    valid: bool


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        match = re.search(r"-?\d+(?:\.\d+)?", text)
        return float(match.group(0)) if match else 0.0


def _mapping(
    id: str,
    source_field: str,
    target_field: str,
    field_type: str = "text",
    category: str = "basic",
    confidence: float = 0.95,
    **extra: Any,
) -> FieldMapping:
    return FieldMapping(
        id=id,
        source_field=source_field,
        target_field=target_field,
        field_type=field_type,
        category=category,
        confidence=confidence,
        **extra,
    )


_NUMBER_IN_TEXT = r"^.*?([0-9]+\.?[0-9]*).*$"

DEFAULT_FIELD_MAPPINGS: list[FieldMapping] = [
    _mapping(
        "name_mapping",
        "name",
        "yacht_name",
        confidence=0.98,
        description="Yacht name (primary)",
        examples=["BLUE INFINITY ONE", "STARK", "AQUA LIBRA"],
    ),
    _mapping(
        "name_o_fship_mapping",
        "Name_o_fShip",
        "yacht_name",
        description="Yacht name from certificate field",
        examples=["BLUE INFINITY ONE"],
    ),
    _mapping(
        "call_sign_mapping",
        "Callsign",
        "call_sign",
        confidence=0.98,
        description="Radio call sign",
        examples=["9HB9361", "GBSS"],
    ),
    _mapping(
        "official_no_mapping",
        "OfficialNo",
        "official_number",
        description="Official registration number",
        examples=["22106", "1174981"],
    ),
    _mapping(
        "certificate_number_mapping",
        "Certificate_No",
        "certificate_number",
        category="certificate",
        description="Certificate number",
        examples=["1149455", "1100002"],
    ),
    _mapping(
        "builder_mapping",
        "builder",
        "builder",
        confidence=0.98,
        description="Yacht builder/manufacturer",
        examples=["SUNSEEKER INTERNATIONAL LIMITED", "AZIMUT"],
    ),
    _mapping(
        "length_overall_mapping",
        "Length_overall",
        "length_overall",
        field_type="number",
        category="specifications",
        confidence=0.98,
        validation=_NUMBER_IN_TEXT,
        description="Overall length in meters",
        examples=["28.06", "45.5 m"],
    ),
    _mapping(
        "beam_mapping",
        "Main_breadth",
        "beam",
        field_type="number",
        category="specifications",
        confidence=0.98,
        validation=_NUMBER_IN_TEXT,
        description="Beam width in meters",
        examples=["6.55", "8.2"],
    ),
    _mapping(
        "gross_tonnage_mapping",
        "Particulars_of_Tonnage",
        "gross_tonnage",
        field_type="number",
        category="specifications",
        confidence=0.9,
        validation=_NUMBER_IN_TEXT,
        description="Gross tonnage",
        examples=["102.04", "1200.5 GT"],
    ),
    _mapping(
        "propulsion_type_mapping",
        "Propulsion",
        "propulsion_type",
        category="specifications",
        description="Propulsion arrangement",
        examples=["MOTOR SHIP TWIN SCREW", "DIESEL"],
    ),
    _mapping(
        "combined_kw_mapping",
        "Propulsion_Power",
        "engine_power",
        field_type="number",
        category="specifications",
        confidence=0.98,
        validation=r"^.*?(?:Combined KW\s*)?([0-9]+\.?[0-9]*)\s*(?:KW)?$",
        description="Combined engine power in KW",
        examples=["Combined KW 2944", "2864", "3200 KW"],
    ),
    _mapping(
        "certificate_issued_date_mapping",
        "Certificate_issued_this",
        "certificate_issued_date",
        field_type="date",
        category="certificate",
        date_format="DD-MM-YYYY",
        description="Certificate issue date",
        examples=["10 December 2020", "July 2026"],
    ),
    _mapping(
        "certificate_expires_mapping",
        "This_certificate_expires_on",
        "certificate_expires_date",
        field_type="date",
        category="certificate",
        date_format="DD-MM-YYYY",
        description="Certificate expiry date",
        examples=["06 July 2026", "31 January 2024"],
    ),
    _mapping(
        "provisional_registration_mapping",
        "Provisionally_registered_on",
        "provisional_registration_date",
        field_type="date",
        category="certificate",
        confidence=0.9,
        date_format="DD-MM-YYYY",
        description="Provisional registration date",
        examples=["07 July 2025", "January 2024"],
    ),
    _mapping(
        "no_year_home_port_mapping",
        "No_Year",
        "registration_info",
        confidence=0.9,
        description="Combined registration number, year, and home port",
        examples=["536 IN 2023 VALLETTA"],
    ),
    _mapping(
        "registry_for_mapping",
        "registry_for",
        "flag_state",
        confidence=0.85,
        description="Registry/flag state information",
        examples=["MALTA", "CAYMAN ISLANDS"],
    ),
    _mapping(
        "vessel_description_mapping",
        "Description_of_Vessel",
        "vessel_description",
        confidence=0.9,
        description="Framework and vessel description",
        examples=["GRP COMMERCIAL YACHT", "SAILING YACHT"],
    ),
]


class FieldMappingSet:
    """A named collection of field mappings backed by a YAML file.

    Args:
        mappings_path: YAML file holding a ``mappings`` list. When it does
            not exist the built-in defaults are used.
    """

    def __init__(
        self, mappings_path: Path = Path("configs/field_mappings.yaml")
    ) -> None:
        self.mappings = self._load_mappings(mappings_path)

    def _load_mappings(self, path: Path) -> list[FieldMapping]:
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            entries = data.get("mappings", [])
            if entries:
                logger.info("Loaded %d field mappings from %s", len(entries), path)
                return [FieldMapping(**entry) for entry in entries]
        logger.debug("No field mappings at %s, using defaults", path)
        return [FieldMapping(**asdict(m)) for m in DEFAULT_FIELD_MAPPINGS]

    def save(self, path: Path) -> None:
        """Write the mapping set to a YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(
                {"mappings": [asdict(m) for m in self.mappings]},
                f,
                sort_keys=False,
            )
        logger.info("Saved %d field mappings to %s", len(self.mappings), path)

    def active(self) -> list[FieldMapping]:
        return [m for m in self.mappings if m.is_active]

    def runtime_mapping(self) -> dict[str, str]:
        """Return ``source field -> target field`` for active mappings."""
        return {m.source_field: m.target_field for m in self.active()}

    def upsert(self, mapping: FieldMapping) -> None:
        """Replace the mapping with the same id, or append a new one."""
        for i, existing in enumerate(self.mappings):
            if existing.id == mapping.id:
                self.mappings[i] = mapping
                return
        self.mappings.append(mapping)

    def remove(self, mapping_id: str) -> bool:
        before = len(self.mappings)
        self.mappings = [m for m in self.mappings if m.id != mapping_id]
        return len(self.mappings) < before

    def apply(self, record: dict[str, Any]) -> dict[str, Any]:
        """Translate a flat extracted record through the active mappings.

        When several source fields feed the same target, the mapping with
        the higher confidence wins.

        Args:
            record: Extracted field name to raw value.

        Returns:
            Yacht field name to converted value.
        """
        result: dict[str, Any] = {}
        winning_confidence: dict[str, float] = {}

        for mapping in self.active():
            value = record.get(mapping.source_field)
            if value is None or value == "":
                continue
            target = mapping.target_field
            if mapping.confidence <= winning_confidence.get(target, -1.0):
                continue
            result[target] = mapping.convert(value)
            winning_confidence[target] = mapping.confidence

        logger.info("Applied field mappings: %d yacht fields populated", len(result))
        return result

    @staticmethod
    def test_mapping(mapping: FieldMapping) -> list[MappingTestResult]:
        """Run each example of a mapping through its conversion.

        A mapping without examples is tested with a placeholder value.
        """
        samples = mapping.examples or ["Sample Value"]
        results: list[MappingTestResult] = []
        for sample in samples:
            try:
                output = mapping.convert(sample)
                valid = True
            except re.error as exc:
                logger.warning("Bad validation pattern on %s: %s", mapping.id, exc)
                output = None
                valid = False
            results.append(MappingTestResult(input=sample, output=output, valid=valid))
        return results
