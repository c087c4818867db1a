"""File validation utilities for document uploads"""

import os
import re
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple


# Supported MIME types mapped to the short file type stored on the document
SUPPORTED_MIME_TYPES: Dict[str, str] = {
    'application/pdf': 'pdf',
    'application/msword': 'doc',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': 'docx',
}


def is_supported_mime_type(mime_type: str) -> bool:
    """Check if MIME type is supported for upload

    Args:
        mime_type: MIME type string (e.g., 'application/pdf')

    Returns:
        True if supported, False otherwise

    Example:
        >>> is_supported_mime_type('application/pdf')
        True
        >>> is_supported_mime_type('text/csv')
        False
    """
    return mime_type in SUPPORTED_MIME_TYPES


def file_type_for(mime_type: str) -> Optional[str]:
    """Short file type ('pdf', 'doc', 'docx') for a supported MIME type"""
    return SUPPORTED_MIME_TYPES.get(mime_type)


def mime_type_for(file_type: str) -> str:
    """MIME type to serve a stored file with, from its short file type"""
    for mime_type, short_type in SUPPORTED_MIME_TYPES.items():
        if short_type == file_type:
            return mime_type
    return "application/octet-stream"


def validate_file_size(size_bytes: int, max_size: int) -> Tuple[bool, Optional[str]]:
    """Validate file size is within limits

    Args:
        size_bytes: File size in bytes
        max_size: Maximum allowed size

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> validate_file_size(1024, 5 * 1024 * 1024)
        (True, None)
        >>> validate_file_size(0, 5 * 1024 * 1024)
        (False, 'File is empty (0 bytes)')
    """
    if size_bytes == 0:
        return False, "File is empty (0 bytes)"

    if size_bytes > max_size:
        return False, f"File exceeds maximum size of {max_size} bytes (got {size_bytes} bytes)"

    return True, None


def validate_filename(filename: str) -> Tuple[bool, Optional[str]]:
    """Validate an uploaded filename

    Validation rules:
    - Not empty
    - Max 255 characters
    - No null bytes
    - No control characters

    Path components are stripped later by sanitize_filename.

    Example:
        >>> validate_filename('policy.pdf')
        (True, None)
        >>> validate_filename('')
        (False, 'Filename cannot be empty')
    """
    if not filename or len(filename.strip()) == 0:
        return False, "Filename cannot be empty"

    if len(filename) > 255:
        return False, f"Filename exceeds 255 characters (got {len(filename)})"

    if '\x00' in filename:
        return False, "Filename contains null bytes"

    if any(ord(c) < 32 for c in filename):
        return False, "Filename contains control characters"

    return True, None


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe storage

    Example:
        >>> sanitize_filename('../../policy.pdf')
        'policy.pdf'
        >>> sanitize_filename('quality manual (v2).docx')
        'quality_manual_v2_.docx'
    """
    # Remove path components
    filename = os.path.basename(filename.replace('\\', '/'))

    # Keep letters, digits, dots and dashes
    filename = re.sub(r'[^a-zA-Z0-9.-]', '_', filename)

    # Collapse runs of underscores
    filename = re.sub(r'_+', '_', filename)

    if len(filename) > 200:
        name, ext = os.path.splitext(filename)
        filename = name[:200 - len(ext)] + ext

    return filename


def unique_storage_name(filename: str, now: Optional[datetime] = None) -> str:
    """Build a collision-resistant stored file name: '{epoch_ms}-{sanitized}'

    Example:
        >>> unique_storage_name('a b.pdf', datetime(2024, 1, 1, tzinfo=timezone.utc))
        '1704067200000-a_b.pdf'
    """
    now = now or datetime.now(timezone.utc)
    return f"{int(now.timestamp() * 1000)}-{sanitize_filename(filename)}"
