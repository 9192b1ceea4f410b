"""Local OCR with Tesseract."""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class OCRText:
    """Text read from one image, with the mean word confidence (0-1)."""

    text: str
    confidence: float
    word_count: int


class TesseractReader:
    """Reads text from page images with Tesseract.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        lang: OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.lang = lang
        self.psm = psm

    def read(self, image: np.ndarray) -> OCRText:
        """Run OCR on one image.

        Args:
            image: Page image as a numpy array.

        Returns:
            Full text plus confidence over the recognised words.
        """
        config = f"--psm {self.psm}"
        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(pil_image, lang=self.lang, config=config)
        data = pytesseract.image_to_data(
            pil_image,
            lang=self.lang,
            config=config,
            output_type=pytesseract.Output.DICT,
        )

        confidences = [
            float(conf)
            for conf, word in zip(data["conf"], data["text"])
            if float(conf) > 0 and word.strip()
        ]
        avg_conf = sum(confidences) / len(confidences) / 100.0 if confidences else 0.0

        logger.info(
            "OCR read %d words with average confidence %.2f",
            len(confidences),
            avg_conf,
        )
        return OCRText(text=text, confidence=avg_conf, word_count=len(confidences))
