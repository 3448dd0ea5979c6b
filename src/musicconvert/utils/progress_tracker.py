"""
Progress tracking module for music-convert.
"""

import os
import time
from typing import Any, Optional

from tqdm import tqdm


class ProgressTracker:
    """
    Per-batch progress display.

    One tracker is created for each batch run. It owns the "current file"
    counter and shows a 0-100% bar for the file being converted, fed by the
    progress FFmpeg reports. Finished files are reported as status lines above
    the bar.
    """

    def __init__(self, total_files: int, use_progress_bars: bool = True, quiet: bool = False):
        """
        Initialize progress tracker.

        Args:
            total_files: Number of files in the batch
            use_progress_bars: Whether to draw a bar for the running conversion
            quiet: Suppress per-file output; the final summary is still printed
        """
        self.total_files = total_files
        self.current = 0
        self.use_progress_bars = use_progress_bars and not quiet
        self.quiet = quiet

        self._pbar = None
        self._current_name = ''

    @property
    def position(self) -> str:
        return f"[{self.current + 1}/{self.total_files}]"

    def start(self, filename: str):
        """Begin tracking a file conversion."""
        self._current_name = os.path.basename(filename)
        self._close_bar()

        if self.use_progress_bars:
            self._pbar = tqdm(
                total=100,
                desc=f"{self.position} Converting: {self._current_name}",
                bar_format="{desc} {percentage:5.1f}%|{bar}|",
                colour="cyan",
                leave=False
            )
        elif not self.quiet:
            print(f"{self.position} Converting: {self._current_name}")

    def update(self, progress: Any):
        """
        Relay a progress snapshot reported by FFmpeg.

        Args:
            progress: Object with an optional ``percent`` attribute
        """
        percent = getattr(progress, 'percent', None)
        if self._pbar is None or percent is None:
            return

        self._pbar.n = max(0.0, min(100.0, percent))
        self._pbar.refresh()

    def success(self, filename: str):
        self.current += 1
        self._close_bar()
        self._write(format_file_status(filename, "OK", prefix=self._counter()))

    def fail(self, filename: str, error: str):
        self.current += 1
        self._close_bar()
        self._write(f"{format_file_status(filename, 'FAIL', prefix=self._counter())} - {error}")

    def skip(self, filename: str, reason: str):
        self.current += 1
        self._write(f"{format_file_status(filename, 'SKIP', prefix=self._counter())} - {reason}")

    def finish(self, summary: Any, duration_seconds: Optional[float] = None):
        """
        Print the conversion summary.

        Args:
            summary: ConversionSummary of the batch
            duration_seconds: Total processing time, if measured
        """
        self._close_bar()

        print("\n" + "=" * 50)
        print("CONVERSION SUMMARY")
        print("=" * 50)
        print(f"Successful: {len(summary.successful)}")
        print(f"Failed:     {len(summary.failed)}")
        print(f"Skipped:    {len(summary.skipped)}")
        if duration_seconds is not None:
            print(f"Processing time: {format_duration(duration_seconds)}")

        if summary.failed:
            print("\nFailed files:")
            for failed in summary.failed:
                print(f"  - {os.path.basename(failed.input_path)}: {failed.error}")

    def _counter(self) -> str:
        return f"[{self.current}/{self.total_files}]"

    def _write(self, message: str):
        if self.quiet:
            return
        tqdm.write(message)

    def _close_bar(self):
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None


class ProcessingTimer:
    """Simple timer for measuring processing duration."""

    def __init__(self):
        self.start_time = None
        self.end_time = None

    def start(self):
        """Start the timer."""
        self.start_time = time.time()

    def stop(self):
        """Stop the timer and return duration."""
        self.end_time = time.time()
        return self.get_duration()

    def get_duration(self) -> float:
        """Get the current duration in seconds."""
        if self.start_time is None:
            return 0.0
        end_time = self.end_time or time.time()
        return end_time - self.start_time


def create_progress_tracker(total_files: int, quiet: bool = False,
                            disable_bars: bool = False) -> ProgressTracker:
    """
    Create a progress tracker with appropriate settings.

    Args:
        total_files: Number of files in the batch
        quiet: Suppress per-file output
        disable_bars: Disable progress bars, printing plain lines instead

    Returns:
        Configured ProgressTracker instance
    """
    return ProgressTracker(total_files, use_progress_bars=not disable_bars, quiet=quiet)


def format_file_status(filename: str, status: str, max_width: int = 50,
                       prefix: Optional[str] = None) -> str:
    """
    Format a filename for display in progress output.

    Args:
        filename: The filename to format
        status: Status string (e.g., "OK", "FAIL", "SKIP")
        max_width: Maximum width for the filename display
        prefix: Optional text placed before the status, such as a counter

    Returns:
        Formatted string for display
    """
    basename = os.path.basename(filename)

    if len(basename) > max_width:
        basename = basename[:max_width - 3] + "..."

    status_text = f"[{status}] {basename}"
    return f"{prefix} {status_text}" if prefix else status_text


def format_duration(seconds: float) -> str:
    """Format duration in a human-readable way."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = seconds % 60
        return f"{hours}h {minutes}m {secs:.1f}s"
