"""
Directory scanning for convertible media files.
"""

import os
import logging
from typing import Iterator, List

AUDIO_EXTENSIONS = frozenset({
    'mp3',  # Existing MP3s are re-encoded in place to normalize them
    'flac', 'wav', 'aac', 'ogg', 'wma', 'm4a', 'aiff', 'ape', 'opus',
})

VIDEO_EXTENSIONS = frozenset({'mp4', 'webm', 'mkv', 'avi', 'mov'})


def _extension(file_path: str) -> str:
    return os.path.splitext(file_path)[1].lower().lstrip('.')


def is_audio_file(file_path: str) -> bool:
    """Check if a file is an audio file based on extension."""
    return _extension(file_path) in AUDIO_EXTENSIONS


def is_video_file(file_path: str) -> bool:
    """Check if a file is a video file based on extension."""
    return _extension(file_path) in VIDEO_EXTENSIONS


def is_convertible_file(file_path: str) -> bool:
    return is_audio_file(file_path) or is_video_file(file_path)


def is_mp3_file(file_path: str) -> bool:
    return _extension(file_path) == 'mp3'


def is_hidden(name: str) -> bool:
    return name.startswith('.')


def scan_directory(directory: str) -> Iterator[str]:
    """
    Recursively yield convertible files below a directory, depth first.

    Hidden entries (name starting with '.') are neither yielded nor descended
    into, symlinks are not followed, and directories that cannot be read are
    skipped silently.

    Args:
        directory: Directory to scan

    Yields:
        str: Absolute path of each convertible file
    """
    absolute_dir = os.path.abspath(directory)

    try:
        with os.scandir(absolute_dir) as it:
            entries = list(it)
    except OSError as e:
        logging.debug(f"Skipping unreadable directory {absolute_dir}: {e}")
        return

    for entry in entries:
        if is_hidden(entry.name):
            continue

        if entry.is_dir(follow_symlinks=False):
            yield from scan_directory(entry.path)
        elif entry.is_file(follow_symlinks=False) and is_convertible_file(entry.name):
            yield entry.path


def collect_audio_files(directory: str) -> List[str]:
    """
    Collect all convertible files below a directory in a reproducible order.

    Args:
        directory: Directory to scan

    Returns:
        list: Absolute paths sorted lexicographically
    """
    return sorted(scan_directory(directory))


def directory_exists(directory: str) -> bool:
    return os.path.isdir(directory)
