"""Configurable validation rules for yacht records.

Validates onboarding and warranty records field by field: presence, date
formats, numeric ranges and maritime identifiers (IMO, MMSI, call sign).
Rules are loaded per record type from YAML, with built-in defaults.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


DATE_FORMATS: list[str] = [
    "%d-%m-%Y",
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d %B %Y",
    "%d %b %Y",
]

REQUIRED_ONBOARDING_FIELDS: list[str] = [
    "vessel_name",
    "official_number",
    "home_port",
    "flag_state",
    "length_overall",
    "beam",
    "owner_name",
    "owner_address",
    "certificate_number",
    "certificate_issued_date",
    "registration_date",
]


@dataclass
class ValidationResult:
    """Result of a single field validation check."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str
    severity: str = "error"


@dataclass
class ValidationReport:
    """Aggregated validation report for one record."""

    all_valid: bool
    results: list[ValidationResult]
    warnings: list[str] = field(default_factory=list)

    @property
    def failed_fields(self) -> list[str]:
        seen: list[str] = []
        for r in self.results:
            if not r.is_valid and r.severity == "error" and r.field_name not in seen:
                seen.append(r.field_name)
        return seen


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


class RulesEngine:
    """Applies per-record-type field rules loaded from YAML.

    Args:
        rules_path: Path to the validation rules YAML file.
    """

    def __init__(
        self, rules_path: Path = Path("configs/validation_rules.yaml")
    ) -> None:
        self.rules = self._load_rules(rules_path)
        self._validators: dict[str, Any] = {
            "required": self._validate_required,
            "date_format": self._validate_date,
            "positive_number": self._validate_positive_number,
            "number_range": self._validate_number_range,
            "year_range": self._validate_year_range,
            "regex": self._validate_regex,
            "imo_number": self._validate_imo_number,
            "mmsi": self._validate_mmsi,
            "call_sign": self._validate_call_sign,
        }

    def _load_rules(self, path: Path) -> dict:
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f)
                if data:
                    logger.info("Loaded validation rules from %s", path)
                    return data
        logger.debug("Using default validation rules")
        return self._default_rules()

    def _default_rules(self) -> dict:
        onboarding: dict[str, list[dict]] = {
            name: [{"type": "required"}] for name in REQUIRED_ONBOARDING_FIELDS
        }
        # Only missing required fields make an onboarding record invalid.
        checked = {"severity": "warning"}
        onboarding["certificate_issued_date"].append({"type": "date_format", **checked})
        onboarding["registration_date"].append({"type": "date_format", **checked})
        onboarding["certificate_expiry_date"] = [{"type": "date_format", **checked}]
        onboarding["length_overall"].append(
            {
                "type": "number_range",
                "min": 1,
                "severity": "warning",
                "message": "Length overall seems too small",
            }
        )
        onboarding["beam"].append({"type": "positive_number", **checked})
        onboarding["draft"] = [{"type": "positive_number", **checked}]
        onboarding["gross_tonnage"] = [{"type": "positive_number", **checked}]
        onboarding["year_built"] = [
            {
                "type": "year_range",
                "min": 1900,
                "severity": "warning",
                "message": "Year built seems incorrect",
            }
        ]
        onboarding["mmsi"] = [{"type": "mmsi", **checked}]
        onboarding["call_sign"] = [{"type": "call_sign", **checked}]

        return {
            "yacht_onboarding": onboarding,
            "warranty": {
                "start_date": [{"type": "required"}, {"type": "date_format"}],
                "duration_months": [
                    {"type": "required"},
                    {"type": "number_range", "min": 1, "max": 240},
                ],
                "manufacturer": [{"type": "required", "severity": "warning"}],
            },
        }

    def validate(
        self, record: dict[str, Any], record_type: str = "yacht_onboarding"
    ) -> ValidationReport:
        """Validate a record against the rules for its type.

        Rules marked ``severity: warning`` are reported in ``warnings`` and
        do not make the record invalid.

        Args:
            record: Field name to value.
            record_type: Rule set to apply.

        Returns:
            Validation report.
        """
        results: list[ValidationResult] = []
        warnings: list[str] = []

        type_rules = self.rules.get(record_type)
        if type_rules is None:
            warnings.append(f"No rules for record type: {record_type}")
            type_rules = {}

        for field_name, rules in type_rules.items():
            value = record.get(field_name)

            for rule in rules:
                rule_type = rule.get("type")
                validator = self._validators.get(rule_type)

                if not validator:
                    warnings.append(f"Unknown rule type: {rule_type}")
                    continue

                result = validator(field_name, value, rule)
                result.severity = rule.get("severity", "error")
                if not result.is_valid and "message" in rule:
                    result.message = rule["message"]
                results.append(result)

                if not result.is_valid and result.severity == "warning":
                    warnings.append(result.message)

        all_valid = all(r.is_valid for r in results if r.severity == "error")
        logger.info(
            "Validation for %s: %s (%d checks)",
            record_type,
            "PASSED" if all_valid else "FAILED",
            len(results),
        )
        return ValidationReport(all_valid=all_valid, results=results, warnings=warnings)

    def _validate_required(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a field is present and non-empty; zero counts as empty."""
        if not _is_missing(value) and (isinstance(value, str) or value):
            return ValidationResult(field_name, True, "Required field present", "required")
        return ValidationResult(
            field_name, False, f"Required field missing: {field_name}", "required"
        )

    def _validate_date(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a value parses as a supported date."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "date_format")
        if isinstance(value, date):
            return ValidationResult(field_name, True, "Date value", "date_format")

        for fmt in rule.get("formats", DATE_FORMATS):
            try:
                datetime.strptime(str(value).strip(), fmt)
                return ValidationResult(
                    field_name, True, f"Valid date format: {fmt}", "date_format"
                )
            except ValueError:
                continue

        return ValidationResult(
            field_name, False, f"Invalid date format: {value}", "date_format"
        )

    def _validate_positive_number(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a value is a number greater than zero."""
        if _is_missing(value):
            return ValidationResult(
                field_name, True, "No value to validate", "positive_number"
            )
        number = _to_number(value)
        if number is None:
            return ValidationResult(
                field_name, False, f"Invalid number: {value}", "positive_number"
            )
        if number > 0:
            return ValidationResult(
                field_name, True, f"Valid positive number: {number}", "positive_number"
            )
        return ValidationResult(
            field_name, False, f"Number must be positive: {number}", "positive_number"
        )

    def _validate_number_range(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a number falls within ``[min, max]``."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "number_range")
        number = _to_number(value)
        if number is None:
            return ValidationResult(
                field_name, False, f"Invalid number: {value}", "number_range"
            )
        min_val = float(rule.get("min", float("-inf")))
        max_val = float(rule.get("max", float("inf")))
        if min_val <= number <= max_val:
            return ValidationResult(field_name, True, "Number in valid range", "number_range")
        return ValidationResult(
            field_name,
            False,
            f"{field_name} {number:g} outside range [{min_val:g}, {max_val:g}]",
            "number_range",
        )

    def _validate_year_range(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a year is between ``min`` and ``max`` (default: this year)."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "year_range")
        number = _to_number(value)
        min_year = int(rule.get("min", 1900))
        max_year = int(rule.get("max", date.today().year))
        if number is not None and min_year <= number <= max_year:
            return ValidationResult(field_name, True, "Year in valid range", "year_range")
        return ValidationResult(
            field_name,
            False,
            f"Year {value} outside range [{min_year}, {max_year}]",
            "year_range",
        )

    def _validate_regex(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Validate a value against a custom regex pattern."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "regex")
        pattern = rule.get("pattern", "")
        if re.match(pattern, str(value)):
            return ValidationResult(field_name, True, "Matches pattern", "regex")
        return ValidationResult(
            field_name, False, f"Does not match pattern: {pattern}", "regex"
        )

    def _validate_imo_number(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Validate an IMO ship number, including its check digit.

        The last digit equals the sum of the first six digits weighted
        7..2, modulo 10.
        """
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "imo_number")
        digits = re.sub(r"^IMO\s*", "", str(value).strip(), flags=re.IGNORECASE)
        if not re.fullmatch(r"\d{7}", digits):
            return ValidationResult(
                field_name, False, f"IMO number must be 7 digits: {value}", "imo_number"
            )
        checksum = sum(int(d) * w for d, w in zip(digits[:6], range(7, 1, -1))) % 10
        if checksum == int(digits[6]):
            return ValidationResult(field_name, True, "Valid IMO number", "imo_number")
        return ValidationResult(
            field_name, False, f"IMO check digit mismatch: {value}", "imo_number"
        )

    def _validate_mmsi(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Validate a 9-digit MMSI."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "mmsi")
        if re.fullmatch(r"\d{9}", str(value).strip()):
            return ValidationResult(field_name, True, "Valid MMSI", "mmsi")
        return ValidationResult(field_name, False, f"Invalid MMSI: {value}", "mmsi")

    def _validate_call_sign(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Validate a radio call sign: 3 to 7 letters and digits."""
        if _is_missing(value):
            return ValidationResult(field_name, True, "No value to validate", "call_sign")
        if re.fullmatch(r"[A-Z0-9]{3,7}", str(value).strip().upper()):
            return ValidationResult(field_name, True, "Valid call sign", "call_sign")
        return ValidationResult(
            field_name, False, f"Invalid call sign: {value}", "call_sign"
        )
