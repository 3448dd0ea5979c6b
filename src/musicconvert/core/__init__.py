"""
Core conversion modules.
"""

from .processor import BatchConverter, ConversionOptions, ConversionSummary
from .converter import AudioConverter, ConversionResult, ProgressInfo, get_output_path
from .metadata import TagRenamer, RenameResult

__all__ = [
    "BatchConverter",
    "ConversionOptions",
    "ConversionSummary",
    "AudioConverter",
    "ConversionResult",
    "ProgressInfo",
    "get_output_path",
    "TagRenamer",
    "RenameResult"
]
