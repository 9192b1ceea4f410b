"""Google Document AI certificate fields to yacht onboarding sections.

Splits a scanned certificate of registry into the two halves of the
onboarding form: basic vessel information and technical specifications.
A destination key is only present when its source field was read.
"""

from dataclasses import dataclass, field
from typing import Any

from fleetops.utils.logger import get_logger

from .normalizers import (
    extract_engine_kw,
    extract_numeric_value,
    extract_year,
    flag_state,
    format_date_dd_mm_yyyy,
    owner_name,
    owner_type,
    parse_build_info,
    vessel_category,
    vessel_type,
)

logger = get_logger(__name__)

# Certificate label -> basic info key, copied verbatim.
_BASIC_TEXT_FIELDS: list[tuple[str, str]] = [
    ("Callsign", "call_sign"),
    ("OfficialNo", "official_number"),
    ("Certificate_No", "certificate_number"),
    ("HULL_ID", "imo_number"),
    ("Framework", "hull_material"),
]

_BASIC_DATE_FIELDS: list[tuple[str, str]] = [
    ("Certificate_issued_this", "certificate_issued_date"),
    ("This_certificate_expires_on", "certificate_expires_date"),
    ("Provisionally_registered_on", "provisional_registration_date"),
    ("Registered_on", "registration_date"),
]

_NUMERIC_SPECIFICATIONS: list[tuple[str, str]] = [
    ("Length_overall", "length_overall"),
    ("Main_breadth", "beam"),
    ("Depth", "draft"),
    ("Particulars_of_Tonnage", "gross_tonnage"),
]

_ONBOARDING_RENAMES = {
    "name": "vessel_name",
    "type": "vessel_type",
    "year": "year_built",
    "certificate_expires_date": "certificate_expiry_date",
}


@dataclass
class YachtMappingResult:
    """Onboarding form sections populated from one certificate."""

    basic_info: dict[str, Any] = field(default_factory=dict)
    specifications: dict[str, Any] = field(default_factory=dict)

    @property
    def field_count(self) -> int:
        return len(self.basic_info) + len(self.specifications)

    def onboarding_record(self) -> dict[str, Any]:
        """Both sections flattened under onboarding form field names."""
        record = {**self.basic_info, **self.specifications}
        for section_key, form_key in _ONBOARDING_RENAMES.items():
            if section_key in record:
                record[form_key] = record.pop(section_key)
        return record


class GoogleDocumentAIYachtMapper:
    """Maps Document AI certificate labels onto yacht onboarding data."""

    def map_fields(self, fields: dict[str, Any]) -> YachtMappingResult:
        """Populate onboarding sections from Document AI fields.

        Args:
            fields: Flat label/value pairs read from the certificate.

        Returns:
            Basic info and specification sections.
        """
        values = {
            label: str(value)
            for label, value in fields.items()
            if value is not None and value != ""
        }
        result = YachtMappingResult()
        basic = result.basic_info
        specs = result.specifications

        if "Name_o_fShip" in values:
            basic["name"] = values["Name_o_fShip"]

        if "Description_of_Vessel" in values:
            basic["type"] = vessel_type(values["Description_of_Vessel"])
            basic["category"] = vessel_category(values["Description_of_Vessel"])

        if "Home_Port" in values:
            basic["home_port"] = values["Home_Port"]
            basic["flag_state"] = flag_state(values["Home_Port"])

        if "When_and_Where_Built" in values:
            year, builder = parse_build_info(values["When_and_Where_Built"])
            if year:
                basic["year"] = year
            if builder:
                basic["builder"] = builder

        engine_makers = values.get("Engine_Makers")
        if engine_makers:
            basic.setdefault("builder", engine_makers)

        engine_year = extract_year(values.get("Engines_Year_of_Make"))
        if engine_year:
            basic.setdefault("year", engine_year)

        for label, key in _BASIC_TEXT_FIELDS:
            if label in values:
                basic[key] = values[label]

        if "Owners_description" in values:
            basic["owner_type"] = owner_type(values["Owners_description"])

        if "Owners_residence" in values:
            basic["owner_address"] = values["Owners_residence"]
            basic["owner_name"] = owner_name(values["Owners_residence"])

        for label, key in _BASIC_DATE_FIELDS:
            if label in values:
                basic[key] = format_date_dd_mm_yyyy(values[label])

        for label, key in _NUMERIC_SPECIFICATIONS:
            if label in values:
                specs[key] = extract_numeric_value(values[label])

        if "Propulsion_Power" in values:
            specs["engine_power"] = extract_engine_kw(values["Propulsion_Power"])

        if "Number_and_Description_of_Engines" in values:
            specs["engine_type"] = values["Number_and_Description_of_Engines"]

        if engine_makers:
            specs["engine_manufacturer"] = engine_makers

        if "Engines_Year_of_Make" in values:
            specs["engine_year"] = engine_year

        logger.info(
            "Mapped certificate: %d basic info fields, %d specification fields",
            len(basic),
            len(specs),
        )
        return result
