import io
import re
from pypdf import PdfReader

from mockinterview.exceptions import ExtractionError


def preprocess_text(text: str) -> str:
    text = re.sub(r'\nPage \d+\n', '\n', text)
    text = re.sub(r'\n\s*\n', '\n', text)
    return text.strip()


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page in order; raise ExtractionError if there is none."""
    try:
        pdf_reader = PdfReader(io.BytesIO(data))
        text = ""
        for page in pdf_reader.pages:
            text += (page.extract_text() or "") + "\n"
    except Exception as ex:
        raise ExtractionError("Error parsing PDF", {"reason": str(ex)}) from ex
    text = preprocess_text(text)
    if not text:
        raise ExtractionError("Could not extract text from PDF")
    return text
