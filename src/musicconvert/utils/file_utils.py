"""
File utility functions: filename sanitizing and ffprobe access.
"""

import os
import re
import json
import logging
import subprocess
from typing import Any, Dict, Optional

from unidecode import unidecode

MAX_FILENAME_LENGTH = 200

PROBLEMATIC_PUNCTUATION = re.compile(r"['‘’\"“”`,;:!?]")
ILLEGAL_CHARS = re.compile(r'[/\\?<>:*|"]')
CONTROL_CHARS = re.compile(r'[\x00-\x1f\x80-\x9f]')
RESERVED_NAMES = re.compile(r'^\.+$')
WINDOWS_RESERVED_NAMES = re.compile(r'^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$', re.IGNORECASE)
WINDOWS_TRAILING = re.compile(r'[. ]+$')
MULTIPLE_SPACES = re.compile(r'\s+')
MULTIPLE_UNDERSCORES = re.compile(r'_+')
TRAILING_JUNK = re.compile(r'[.\s_]+$')
LEADING_JUNK = re.compile(r'^[.\s_]+')


def _get_subprocess_startupinfo():
    """Get startupinfo to hide console windows on Windows."""
    startupinfo = None
    creationflags = 0
    if os.name == 'nt':
        startupinfo = subprocess.STARTUPINFO()
        startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
        startupinfo.wShowWindow = subprocess.SW_HIDE
        creationflags = subprocess.CREATE_NO_WINDOW
    return startupinfo, creationflags


def transliterate(text: str) -> str:
    """
    Fold any Unicode text to its closest ASCII spelling.

    Accented letters lose their accents and other scripts are romanized,
    e.g. "Кино" becomes "Kino".

    Args:
        text: Text to transliterate

    Returns:
        str: ASCII-only text
    """
    return unidecode(text)


def _replace_reserved(name: str, replacement: str = '_') -> str:
    """Replace characters and names the operating system does not allow."""
    name = ILLEGAL_CHARS.sub(replacement, name)
    name = CONTROL_CHARS.sub(replacement, name)
    name = RESERVED_NAMES.sub(replacement, name)
    name = WINDOWS_RESERVED_NAMES.sub(replacement, name)
    name = WINDOWS_TRAILING.sub(replacement, name)
    return name


def sanitize_filename(filename: str) -> str:
    """
    Turn arbitrary text into a safe, ASCII-only file name.

    Never raises and never returns an empty string. Applying it twice gives
    the same result as applying it once.

    Args:
        filename: Original name, without extension

    Returns:
        str: Sanitized name of at most 200 characters
    """
    sanitized = transliterate(filename)

    sanitized = PROBLEMATIC_PUNCTUATION.sub('', sanitized)

    sanitized = _replace_reserved(sanitized)

    sanitized = MULTIPLE_SPACES.sub(' ', sanitized)
    sanitized = MULTIPLE_UNDERSCORES.sub('_', sanitized)
    sanitized = TRAILING_JUNK.sub('', sanitized)
    sanitized = LEADING_JUNK.sub('', sanitized)

    if len(sanitized) > MAX_FILENAME_LENGTH:
        sanitized = sanitized[:MAX_FILENAME_LENGTH]

    # Truncation can expose a trailing dot, space or underscore
    sanitized = TRAILING_JUNK.sub('', sanitized).strip()

    # Stripping can also expose a device name, e.g. "_con_" -> "con"
    if not sanitized or _is_reserved_name(sanitized):
        return 'untitled'
    return sanitized


def _is_reserved_name(name: str) -> bool:
    return bool(RESERVED_NAMES.match(name) or WINDOWS_RESERVED_NAMES.match(name))


def probe_media(file_path: str, ffprobe_path: str = 'ffprobe') -> Dict[str, Any]:
    """
    Read stream and format information from a media file using ffprobe.

    Args:
        file_path: Path to the media file
        ffprobe_path: ffprobe executable

    Returns:
        dict: Parsed ffprobe JSON with 'streams' and 'format' keys

    Raises:
        subprocess.CalledProcessError: If ffprobe rejects the file
        OSError: If ffprobe cannot be started
        ValueError: If ffprobe output is not valid JSON
    """
    ffprobe_command = [
        ffprobe_path, '-v', 'quiet', '-print_format', 'json',
        '-show_format', '-show_streams', file_path
    ]
    startupinfo, creationflags = _get_subprocess_startupinfo()
    result = subprocess.run(
        ffprobe_command,
        capture_output=True,
        text=True,
        encoding='utf-8',
        errors='replace',
        check=True,
        startupinfo=startupinfo,
        creationflags=creationflags
    )
    return json.loads(result.stdout or '{}')


def get_format_tags(file_path: str, ffprobe_path: str = 'ffprobe') -> Dict[str, str]:
    """
    Get the container-level tags of a media file.

    Args:
        file_path: Path to the media file
        ffprobe_path: ffprobe executable

    Returns:
        dict: Tag names as reported by ffprobe (case preserved)
    """
    data = probe_media(file_path, ffprobe_path)
    return data.get('format', {}).get('tags', {}) or {}


def has_audio_stream(probe_data: Dict[str, Any]) -> bool:
    """Check whether ffprobe output lists at least one audio stream."""
    return any(
        stream.get('codec_type') == 'audio'
        for stream in probe_data.get('streams', []) or []
    )


def get_file_size(file_path: str) -> Optional[int]:
    """
    Get file size in bytes.

    Returns:
        int: Size in bytes, or None if the file cannot be stat'd
    """
    try:
        return os.path.getsize(file_path)
    except OSError as e:
        logging.debug(f"Cannot stat {file_path}: {e}")
        return None
