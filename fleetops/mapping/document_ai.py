"""Direct processing of Google Document AI certificate fields.

Document AI's custom extractor returns one key per labelled region of a
registration certificate, using the label names it was trained with
(``Certificate_No``, ``Name_o_fShip``, ...). This module renames those keys
to the snake_case names used on yacht profiles and normalises their values.
"""

from typing import Any

from fleetops.utils.logger import get_logger

from .normalizers import (
    extract_engine_kw,
    extract_numeric_value,
    extract_year,
    format_date_dd_mm_yyyy,
)

logger = get_logger(__name__)


DOCUMENT_AI_FIELDS: tuple[str, ...] = (
    "Certificate_No",
    "No_Year",
    "Callsign",
    "OfficialNo",
    "Name_o_fShip",
    "Home_Port",
    "Description_of_Vessel",
    "When_and_Where_Built",
    "Framework",
    "HULL_ID",
    "Length_overall",
    "Particulars_of_Tonnage",
    "Main_breadth",
    "Depth",
    "Propulsion_Power",
    "Propulsion",
    "Number_and_Description_of_Engines",
    "Engine_Makers",
    "Engines_Year_of_Make",
    "Owners_description",
    "Owners_residence",
    "Provisionally_registered_on",
    "Registered_on",
    "Certificate_issued_this",
    "This_certificate_expires_on",
)

DIRECT_FIELD_MAPPING: dict[str, str] = {
    # certificate
    "Certificate_No": "certificate_number",
    "No_Year": "registration_info",
    "Callsign": "call_sign",
    "OfficialNo": "official_number",
    # identity
    "Name_o_fShip": "name",
    "Home_Port": "home_port",
    "Description_of_Vessel": "vessel_description",
    # build
    "When_and_Where_Built": "builder_info",
    "Framework": "hull_material",
    "HULL_ID": "imo_number",
    # dimensions
    "Length_overall": "length_overall",
    "Particulars_of_Tonnage": "gross_tonnage",
    "Main_breadth": "beam",
    "Depth": "draft",
    # propulsion
    "Propulsion_Power": "engine_power",
    "Propulsion": "propulsion_type",
    "Number_and_Description_of_Engines": "engine_description",
    "Engine_Makers": "engine_manufacturer",
    "Engines_Year_of_Make": "engine_year",
    # owner
    "Owners_description": "owner_description",
    "Owners_residence": "owner_address",
    # registration dates
    "Provisionally_registered_on": "provisional_registration_date",
    "Registered_on": "registration_date",
    "Certificate_issued_this": "certificate_issued_date",
    "This_certificate_expires_on": "certificate_expires_date",
}

DATE_FIELDS = frozenset(
    {
        "Provisionally_registered_on",
        "Registered_on",
        "Certificate_issued_this",
        "This_certificate_expires_on",
    }
)

# Official numbers are kept as text; leading zeros matter.
NUMERIC_FIELDS = frozenset(
    {
        "Length_overall",
        "Main_breadth",
        "Depth",
        "Particulars_of_Tonnage",
        "Propulsion_Power",
        "Engines_Year_of_Make",
    }
)


class DocumentAIProcessor:
    """Renames and normalises a flat Document AI field dictionary.

    Args:
        field_mapping: Document AI label to internal field name. Defaults
            to :data:`DIRECT_FIELD_MAPPING`.
    """

    def __init__(self, field_mapping: dict[str, str] | None = None) -> None:
        self.field_mapping = field_mapping or DIRECT_FIELD_MAPPING

    def process(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Map every non-empty Document AI field to its internal name.

        Fields without a mapping keep their original name so nothing read
        from the certificate is lost.

        Args:
            fields: Flat label/value pairs from Document AI.

        Returns:
            Internal field name to normalised value.
        """
        processed: dict[str, Any] = {}

        for source_name, value in fields.items():
            if value is None or value == "":
                continue

            target_name = self.field_mapping.get(source_name)
            if target_name is None:
                logger.debug("No mapping for %s, keeping original name", source_name)
                target_name = source_name

            processed[target_name] = self.process_value(source_name, value)

        logger.info("Processed %d Document AI fields", len(processed))
        return processed

    def process_value(self, source_name: str, value: Any) -> Any:
        """Normalise one value according to the kind of field it came from."""
        if not isinstance(value, str):
            return value

        if source_name in DATE_FIELDS:
            return format_date_dd_mm_yyyy(value.strip())

        if source_name in NUMERIC_FIELDS:
            if source_name == "Propulsion_Power":
                number = extract_engine_kw(value)
            elif source_name == "Engines_Year_of_Make":
                number = extract_year(value)
            else:
                number = extract_numeric_value(value)
            return value.strip() if number is None else number

        return value.strip()
