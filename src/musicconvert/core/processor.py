"""
Batch processor orchestrating the conversion workflow.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .converter import AudioConverter, ConversionResult, get_output_path, output_exists
from .metadata import TagRenamer
from ..utils.scanner import collect_audio_files, directory_exists, is_mp3_file
from ..utils.progress_tracker import ProgressTracker, ProcessingTimer, create_progress_tracker
from ..exceptions import DirectoryNotFoundError, VerificationError

SKIP_OUTPUT_EXISTS = "output already exists"


@dataclass
class ConversionOptions:
    """User-selected behavior for a batch run."""
    dry_run: bool = False
    keep_original: bool = False
    verbose: bool = False
    quiet: bool = False


@dataclass
class FailedFile:
    input_path: str
    error: str


@dataclass
class SkippedFile:
    input_path: str
    reason: str


@dataclass
class ConversionSummary:
    """Results of a batch run, in processing order."""
    successful: List[ConversionResult] = field(default_factory=list)
    failed: List[FailedFile] = field(default_factory=list)
    skipped: List[SkippedFile] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return len(self.failed) > 0

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed) + len(self.skipped)


class BatchConverter:
    """Converts every media file below a directory, one file at a time."""

    def __init__(self, options: Optional[ConversionOptions] = None,
                 converter: Optional[AudioConverter] = None,
                 renamer: Optional[TagRenamer] = None):
        """
        Initialize the batch converter.

        Args:
            options: Batch options (dry run, keep originals, verbosity)
            converter: Converter to use; a default AudioConverter if omitted
            renamer: Renamer to use; a default TagRenamer if omitted
        """
        self.options = options or ConversionOptions()
        self.converter = converter or AudioConverter()
        self.renamer = renamer or TagRenamer(ffprobe_path=self.converter.ffprobe_path)

    def convert_directory(self, directory: str,
                          progress_tracker: Optional[ProgressTracker] = None) -> ConversionSummary:
        """
        Convert all media files below a directory.

        Args:
            directory: Directory to scan
            progress_tracker: Tracker to report to; one is created if omitted

        Returns:
            ConversionSummary: Every scanned file as successful, failed or skipped.
            Empty in dry-run mode.

        Raises:
            DirectoryNotFoundError: If the directory does not exist
            DependencyError: If FFmpeg or ffprobe is not available
        """
        summary = ConversionSummary()

        if not directory_exists(directory):
            raise DirectoryNotFoundError(directory)

        logging.info(f"Scanning directory: {directory}")
        files = collect_audio_files(directory)

        if not files:
            logging.info("No audio files found to convert.")
            return summary

        logging.info(f"Found {len(files)} audio file(s) to process.")

        if self.options.dry_run:
            print("\nDry run - would convert:")
            for input_file in files:
                print(f"  {input_file} -> {get_output_path(input_file)}")
            return summary

        self.converter.check_dependencies()

        tracker = progress_tracker or create_progress_tracker(len(files), quiet=self.options.quiet)
        timer = ProcessingTimer()
        timer.start()

        for input_file in files:
            self._process_file(input_file, tracker, summary)

        tracker.finish(summary, timer.stop())
        return summary

    def _process_file(self, input_file: str, tracker: ProgressTracker,
                      summary: ConversionSummary):
        """Run one file through convert, verify, finalize, rename and cleanup."""
        output_file = get_output_path(input_file)
        is_mp3_input = is_mp3_file(input_file)
        verbose = self.options.verbose

        # MP3 inputs write to a temp path that never survives a previous run
        if not is_mp3_input and output_exists(output_file):
            tracker.skip(input_file, SKIP_OUTPUT_EXISTS)
            summary.skipped.append(SkippedFile(input_file, SKIP_OUTPUT_EXISTS))
            return

        tracker.start(input_file)
        finalized = False

        try:
            logging.debug(f"Converting: {input_file}")
            logging.debug(f"Output: {output_file}")

            result = self.converter.convert(
                input_file, output_file,
                verbose=verbose,
                on_progress=tracker.update,
                on_start=lambda command: logging.debug(f"FFmpeg: {command}")
            )

            if not self.converter.verify_output(output_file):
                raise VerificationError(output_file)

            result.output_path = self.converter.finalize_output(input_file, output_file)
            finalized = True

            rename_result = self.renamer.rename_by_tags(result.output_path)
            result.output_path = rename_result.new_path

            if rename_result.renamed:
                logging.debug(f"Renamed to: {os.path.basename(rename_result.new_path)}")
            elif rename_result.reason:
                logging.debug(f"Not renamed: {rename_result.reason}")

            # An MP3 original was already replaced by finalize
            if not self.options.keep_original and not is_mp3_input:
                self.converter.delete_file(input_file)
                logging.debug(f"Deleted original: {input_file}")

            tracker.success(input_file)
            summary.successful.append(result)

        except Exception as e:
            message = str(e)
            logging.debug(f"Conversion of {input_file} failed: {message}")
            tracker.fail(input_file, message)
            summary.failed.append(FailedFile(input_file, message))

            if not finalized:
                self.converter.cleanup_partial_output(output_file)
