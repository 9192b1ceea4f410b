"""Language-model extraction of structured warranty data."""

import json
import re
from typing import Any

from fleetops.errors import AIProviderError
from fleetops.extraction.warranty import extract_warranty_fields
from fleetops.utils.logger import get_logger

from .providers import ChatProvider

logger = get_logger(__name__)

WARRANTY_SYSTEM_PROMPT = """Extract warranty information from the provided text. \
Return a JSON object with the following fields:
- start_date: warranty start date in YYYY-MM-DD format
- duration_months: warranty duration in months (number)
- end_date: warranty end date in YYYY-MM-DD format (if available)
- equipment_type: type of equipment covered
- manufacturer: manufacturer name
- model: equipment model
- serial_number: serial number (if available)
- coverage_details: object describing what is covered
- exclusions: array of exclusions

If any information is not found, set the value to null. Be conservative and \
only extract information you are confident about."""

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class WarrantyAIExtractor:
    """Asks a chat model for warranty fields, with a regex fallback.

    Args:
        provider: Chat provider to prompt. When ``None`` only the regex
            extraction runs.
    """

    def __init__(self, provider: ChatProvider | None = None) -> None:
        self.provider = provider

    def extract(self, text: str) -> dict[str, Any]:
        """Extract warranty fields from document text.

        Returns:
            The model's JSON object, or the regex extraction when no model
            is configured, the call fails, or the reply is not a JSON object.
        """
        if self.provider is None:
            return extract_warranty_fields(text)

        try:
            reply = self.provider.complete(
                [
                    {"role": "system", "content": WARRANTY_SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                temperature=0.1,
            )
        except AIProviderError as exc:
            logger.error("Warranty AI extraction failed: %s", exc)
            return extract_warranty_fields(text)

        try:
            data = json.loads(_FENCE.sub("", reply.strip()))
        except json.JSONDecodeError:
            logger.warning("Failed to parse AI response as JSON: %.200s", reply)
            return extract_warranty_fields(text)

        if not isinstance(data, dict):
            logger.warning("AI response was not a JSON object")
            return extract_warranty_fields(text)
        return data
