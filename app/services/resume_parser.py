import fitz  # pymupdf


def parse_resume(data: bytes) -> str:
    """Extract plain text from an uploaded PDF resume."""
    text = ""
    with fitz.open(stream=data, filetype="pdf") as doc:
        for page in doc:
            text += page.get_text()

    return text.strip()
