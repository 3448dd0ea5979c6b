"""
music-convert - Batch convert audio and video files to MP3

Converts every audio file (and the audio of every video file) below a
directory to 320 kbps MP3 and renames the results to "Artist - Title.mp3"
using their embedded tags.
"""

__version__ = "1.0.0"
__author__ = "music-convert Project"

from .core.processor import BatchConverter, ConversionOptions, ConversionSummary
from .core.converter import AudioConverter
from .core.metadata import TagRenamer
from .exceptions import MusicConvertError

__all__ = [
    "BatchConverter",
    "ConversionOptions",
    "ConversionSummary",
    "AudioConverter",
    "TagRenamer",
    "MusicConvertError",
    "__version__"
]
