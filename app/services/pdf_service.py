import logging
from io import BytesIO
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)


def extract_text_from_pdf(pdf_content: bytes) -> str:
    """
    Extract text from a PDF file and return the raw text.
    """
    try:
        reader = PdfReader(BytesIO(pdf_content))
        text = ""
        for page in reader.pages:
            text += page.extract_text() or ""
        return text.strip()
    except (PdfReadError, ValueError, KeyError, OSError) as e:
        raise ValueError(f"Error extracting text from PDF: {str(e)}")


def read_resume_text(file_path: str) -> str:
    """
    Read a stored résumé as plain text.

    PDFs go through pypdf; anything else (or a PDF pypdf cannot read) is
    decoded as UTF-8 so keyword extraction still has something to work with.
    """
    content = Path(file_path).read_bytes()
    if content.lstrip().startswith(b"%PDF"):
        try:
            text = extract_text_from_pdf(content)
            if text:
                return text
        except ValueError as e:
            logger.warning(f"Falling back to raw text for {file_path}: {e}")
    return content.decode("utf-8", errors="ignore").strip()
