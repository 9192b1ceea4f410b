"""PDF rasterisation for OCR."""

from pathlib import Path

import numpy as np
from pdf2image import convert_from_bytes, convert_from_path
from pdf2image.exceptions import PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError

from fleetops.errors import DocumentReadError
from fleetops.utils.logger import get_logger

logger = get_logger(__name__)


class PDFRasterizer:
    """Renders PDF pages to RGB numpy arrays.

    Args:
        dpi: Render resolution; 300 is a good default for OCR.
    """

    def __init__(self, dpi: int = 300) -> None:
        self.dpi = dpi

    def to_images(self, source: Path | str | bytes) -> list[np.ndarray]:
        """Render every page of a PDF.

        Args:
            source: Path to a PDF file or raw PDF bytes.

        Returns:
            One image per page.

        Raises:
            FileNotFoundError: If a path is given and the file does not exist.
            DocumentReadError: If the PDF cannot be rendered.
        """
        try:
            if isinstance(source, str | Path):
                path = Path(source)
                if not path.exists():
                    raise FileNotFoundError(f"PDF file not found: {path}")
                pages = convert_from_path(str(path), dpi=self.dpi)
            else:
                pages = convert_from_bytes(source, dpi=self.dpi)
        except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError) as exc:
            raise DocumentReadError(f"PDF conversion failed: {exc}") from exc

        images = [np.array(page.convert("RGB")) for page in pages]
        logger.info("Rendered PDF to %d images at %d DPI", len(images), self.dpi)
        return images
