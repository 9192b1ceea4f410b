"""Google Cloud Vision text detection."""

import base64

import httpx

from fleetops.errors import AIProviderError
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


class VisionClient:
    """Minimal client for the Vision ``images:annotate`` endpoint.

    Args:
        api_key: Google Cloud API key.
        base_url: Vision API root.
        client: HTTP client; created with ``timeout_s`` if omitted.
        timeout_s: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://vision.googleapis.com/v1",
        client: httpx.Client | None = None,
        timeout_s: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout_s)

    def detect_text(self, image: bytes) -> str:
        """Return the full text Vision detects in an image.

        Raises:
            AIProviderError: If the request fails or no text is detected.
        """
        body = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [{"type": "TEXT_DETECTION", "maxResults": 1}],
                }
            ]
        }
        try:
            response = self.client.post(
                f"{self.base_url}/images:annotate",
                params={"key": self.api_key},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise AIProviderError(
                f"Vision request failed: {exc}", provider="google_vision"
            ) from exc

        if not response.is_success:
            raise AIProviderError(
                f"Vision API error: {response.status_code}",
                provider="google_vision",
                status_code=response.status_code,
            )

        try:
            responses = response.json().get("responses") or [{}]
            annotations = responses[0].get("textAnnotations")
        except (ValueError, AttributeError, IndexError) as exc:
            raise AIProviderError(
                "Vision returned an unexpected body", provider="google_vision"
            ) from exc
        if not annotations:
            raise AIProviderError("No text detected in image", provider="google_vision")

        text = annotations[0].get("description", "")
        logger.info("Vision detected %d characters", len(text))
        return text
