"""Filesystem-safe names for exported documents and images."""

import re

MAX_FILENAME_BYTES = 255

ILLEGAL_CHARS = re.compile(r'[/\\?<>:*|"]')
CONTROL_CHARS = re.compile(r'[\x00-\x1f\x80-\x9f]')
RESERVED_NAMES = re.compile(r'^\.+$')
WINDOWS_RESERVED = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
WINDOWS_TRAILING = re.compile(r'[. ]+$')


def sanitize_filename(name: str, fallback: str = 'untitled') -> str:
    """
    Make a string safe to use as a single path component.

    Removes path separators and characters reserved on common filesystems,
    control characters, names made only of dots, Windows device names and
    trailing dots/spaces, then truncates to 255 UTF-8 bytes.

    Args:
        name: Raw name (slug, URL segment, ...)
        fallback: Name returned when nothing usable is left

    Returns:
        Sanitized filename
    """
    sanitized = ILLEGAL_CHARS.sub('', name or '')
    sanitized = CONTROL_CHARS.sub('', sanitized)
    sanitized = RESERVED_NAMES.sub('', sanitized)
    sanitized = WINDOWS_RESERVED.sub('', sanitized)
    sanitized = WINDOWS_TRAILING.sub('', sanitized)

    encoded = sanitized.encode('utf-8')
    if len(encoded) > MAX_FILENAME_BYTES:
        sanitized = encoded[:MAX_FILENAME_BYTES].decode('utf-8', errors='ignore')

    return sanitized or fallback


__all__ = ['sanitize_filename']
