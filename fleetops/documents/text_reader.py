"""Turn an uploaded document into plain text.

PDFs are rendered and OCR'd page by page. Images go to Google Vision when
a key is configured, and to local Tesseract when it is not or when Vision
fails. Text uploads are decoded as-is.
"""

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

from fleetops.ai.vision import VisionClient
from fleetops.errors import AIProviderError, DocumentReadError
from fleetops.utils.config import AppConfig
from fleetops.utils.logger import get_logger

from .pdf import PDFRasterizer
from .preprocessing import preprocess_scan
from .tesseract_reader import TesseractReader

logger = get_logger(__name__)

PAGE_SEPARATOR = "\n\n--- Page Break ---\n\n"


@dataclass
class ReadResult:
    """Text read from a document and how it was obtained."""

    text: str
    method: str
    page_count: int = 1
    confidence: float | None = None


class DocumentTextReader:
    """Reads text from PDF, image and plain-text uploads.

    Args:
        config: Application configuration.
        vision: Vision client; built from ``config.ai`` when a key is set.
        ocr: Local OCR reader; built from ``config.ocr`` if omitted.
        rasterizer: PDF renderer; built from ``config.ocr`` if omitted.
    """

    def __init__(
        self,
        config: AppConfig,
        vision: VisionClient | None = None,
        ocr: TesseractReader | None = None,
        rasterizer: PDFRasterizer | None = None,
    ) -> None:
        self.config = config
        if vision is None and config.ai.google_vision_api_key:
            vision = VisionClient(
                config.ai.google_vision_api_key,
                base_url=config.ai.vision_base_url,
                timeout_s=config.ai.timeout_s,
            )
        self.vision = vision
        self.ocr = ocr or TesseractReader(
            tesseract_cmd=config.ocr.tesseract_cmd,
            lang=config.ocr.default_lang,
            psm=config.ocr.psm,
        )
        self.rasterizer = rasterizer or PDFRasterizer(dpi=config.ocr.pdf_dpi)

    def read(
        self, content: bytes, content_type: str, filename: str = "document"
    ) -> ReadResult:
        """Read the text of an uploaded document.

        Args:
            content: Raw file bytes.
            content_type: MIME type reported by the upload.
            filename: Display name for logs.

        Returns:
            Extracted text and the method used.

        Raises:
            DocumentReadError: If the type is unsupported or the file is
                unreadable.
        """
        content_type = (content_type or "").lower()
        logger.info(
            "Reading document %s (%s, %d bytes)", filename, content_type, len(content)
        )

        if "pdf" in content_type:
            return self._read_pdf(content)
        if "image" in content_type:
            return self._read_image(content)
        if "text" in content_type:
            return ReadResult(text=content.decode("utf-8", errors="replace"), method="text")
        raise DocumentReadError("Unsupported document format")

    def _read_pdf(self, content: bytes) -> ReadResult:
        pages = self.rasterizer.to_images(content)
        results = [self.ocr.read(self._prepare(page)) for page in pages]
        confidences = [r.confidence for r in results if r.word_count]
        return ReadResult(
            text=PAGE_SEPARATOR.join(r.text for r in results),
            method="tesseract",
            page_count=len(pages),
            confidence=sum(confidences) / len(confidences) if confidences else 0.0,
        )

    def _read_image(self, content: bytes) -> ReadResult:
        if self.vision is not None:
            try:
                return ReadResult(text=self.vision.detect_text(content), method="vision")
            except AIProviderError as exc:
                logger.warning("Google Vision failed, using local OCR: %s", exc)
        else:
            logger.info("Google Vision API key not available, using local OCR")

        try:
            image = np.array(Image.open(io.BytesIO(content)).convert("RGB"))
        except (UnidentifiedImageError, OSError) as exc:
            raise DocumentReadError(f"Unreadable image: {exc}") from exc

        result = self.ocr.read(self._prepare(image))
        return ReadResult(text=result.text, method="tesseract", confidence=result.confidence)

    def _prepare(self, image: np.ndarray) -> np.ndarray:
        if not self.config.ocr.preprocess_enabled:
            return image
        return preprocess_scan(
            image,
            clip_limit=self.config.ocr.clahe_clip_limit,
            tile_size=self.config.ocr.clahe_tile_size,
        )
