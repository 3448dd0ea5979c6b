"""
Metadata reading and tag-based renaming.
"""

import os
import subprocess
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..utils.file_utils import sanitize_filename, get_format_tags

REQUIRED_TAGS = ('artist', 'title')
MAX_RENAME_ATTEMPTS = 999


@dataclass(frozen=True)
class RenameResult:
    """Outcome of renaming a file after its tags."""
    new_path: str
    renamed: bool
    reason: Optional[str] = None


def lookup_tag(tags: Dict[str, str], name: str) -> Optional[str]:
    """
    Look up a tag regardless of the case the container stores it in.

    Lowercase is preferred, then uppercase, then any other spelling.

    Args:
        tags: Tags as reported by ffprobe
        name: Lowercase tag name

    Returns:
        str: Tag value, or None if absent
    """
    value = tags.get(name) or tags.get(name.upper())
    if value:
        return value

    for key, candidate in tags.items():
        if key.lower() == name and candidate:
            return candidate
    return None


class TagRenamer:
    """Renames media files to "Artist - Title" using their embedded tags."""

    def __init__(self, ffprobe_path: str = 'ffprobe'):
        self.ffprobe_path = ffprobe_path

    def read_tags(self, file_path: str) -> Dict[str, str]:
        """
        Read artist and title from a media file using ffprobe.

        Args:
            file_path: Path to the media file

        Returns:
            dict: 'artist' and/or 'title'; empty if the file cannot be probed
        """
        try:
            tags = get_format_tags(file_path, self.ffprobe_path)
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            logging.warning(f'Could not read tags from {file_path}: {e}')
            return {}

        found = {}
        for name in REQUIRED_TAGS:
            value = lookup_tag(tags, name)
            if value is not None:
                found[name] = value
        return found

    def find_available_path(self, directory: str, name: str, extension: str,
                            current_path: str) -> str:
        """
        Find a free path for ``name``, appending " (n)" on collisions.

        Args:
            directory: Target directory
            name: Sanitized base name
            extension: Extension including the dot
            current_path: Path of the file being renamed

        Returns:
            str: A path that does not exist yet

        Raises:
            FileExistsError: If every candidate up to the attempt limit exists
        """
        candidate = os.path.join(directory, f"{name}{extension}")
        if not os.path.exists(candidate) or _is_same_file(candidate, current_path):
            return candidate

        for counter in range(1, MAX_RENAME_ATTEMPTS + 1):
            candidate = os.path.join(directory, f"{name} ({counter}){extension}")
            if not os.path.exists(candidate):
                return candidate

        raise FileExistsError(
            f"No free name for '{name}{extension}' after {MAX_RENAME_ATTEMPTS} attempts"
        )

    def rename_by_tags(self, file_path: str) -> RenameResult:
        """
        Rename a file to "Artist - Title.ext" based on its tags.

        Never raises: every failure is reported through the ``reason`` of an
        unrenamed result.

        Args:
            file_path: Path to the file to rename

        Returns:
            RenameResult: New path and whether a rename happened
        """
        directory = os.path.dirname(file_path)
        current_name, extension = os.path.splitext(os.path.basename(file_path))

        try:
            tags = self.read_tags(file_path)
            artist = (tags.get('artist') or '').strip()
            title = (tags.get('title') or '').strip()

            missing: List[str] = [
                name for name, value in (('artist', artist), ('title', title)) if not value
            ]
            if missing:
                return RenameResult(
                    new_path=file_path,
                    renamed=False,
                    reason=f"Missing tag(s): {', '.join(missing)}"
                )

            new_name = sanitize_filename(f"{artist} - {title}")
            if new_name == current_name:
                return RenameResult(
                    new_path=file_path,
                    renamed=False,
                    reason="Already correctly named"
                )

            new_path = self.find_available_path(directory, new_name, extension, file_path)
            os.rename(file_path, new_path)
            logging.debug(f"Renamed {file_path} -> {new_path}")

            return RenameResult(new_path=new_path, renamed=True)

        except Exception as e:
            return RenameResult(
                new_path=file_path,
                renamed=False,
                reason=f"Rename failed: {e}"
            )


def _is_same_file(first: str, second: str) -> bool:
    """Check if two paths name the same file, as on case-insensitive filesystems."""
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False
