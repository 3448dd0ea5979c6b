"""
Utility modules for media file processing.
"""

from .file_utils import sanitize_filename, probe_media
from .scanner import scan_directory, collect_audio_files, directory_exists
from .progress_tracker import ProgressTracker, ProcessingTimer, create_progress_tracker

__all__ = [
    "sanitize_filename",
    "probe_media",
    "scan_directory",
    "collect_audio_files",
    "directory_exists",
    "ProgressTracker",
    "ProcessingTimer",
    "create_progress_tracker"
]
