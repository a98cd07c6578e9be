"""
File Upload Utility - checks for the resume attached to a student profile.

Resumes are not uploaded as files; the frontend reads the file and sends it
base64-encoded (optionally as a data URL) inside the profile body. These
checks keep that inline blob within bounds.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)
- Plain Text (.txt)
"""

from typing import Optional

from jobportal.core.config import get_settings
from jobportal.core.errors import ValidationError

settings = get_settings()

ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx', '.txt'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def strip_data_url(blob: str) -> str:
    """'data:application/pdf;base64,JVBER...' -> 'JVBER...'"""
    if blob.startswith('data:') and ',' in blob:
        return blob.split(',', 1)[1]
    return blob


def decoded_size(blob: str) -> int:
    """Size in bytes of the file a base64 string encodes, without decoding it."""
    payload = strip_data_url(blob).strip()
    padding = len(payload) - len(payload.rstrip('='))
    return len(payload) * 3 // 4 - padding


def check_resume_attachment(filename: Optional[str], blob: Optional[str]) -> None:
    """
    Validate an inline resume.

    Raises:
        ValidationError if the extension is not supported or the file is
        larger than settings.max_resume_mb
    """
    errors = []

    if filename:
        ext = get_file_extension(filename)
        if ext not in ALLOWED_EXTENSIONS:
            errors.append(f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX, TXT")

    if blob and decoded_size(blob) > settings.max_resume_mb * 1024 * 1024:
        errors.append(f"File too large. Maximum size: {settings.max_resume_mb}MB")

    if errors:
        raise ValidationError("Invalid resume", errors=errors)
