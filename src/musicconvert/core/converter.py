"""
Audio file conversion functionality.

Each input is converted by a single FFmpeg run to MP3 (320k, 44.1kHz,
stereo), checked with ffprobe and then moved into its final place.
"""

import os
import re
import shlex
import logging
import subprocess
from collections import deque
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..utils.file_utils import (
    sanitize_filename, probe_media, has_audio_stream, get_file_size,
    _get_subprocess_startupinfo
)
from ..utils.scanner import is_video_file, is_mp3_file
from ..exceptions import DependencyError, ConversionError

FFMPEG_OPTIONS = {
    'audio_codec': 'libmp3lame',
    'bitrate': '320k',
    'sample_rate': 44100,
    'channels': 2,
}

# Cover art: baseline JPEG no larger than 640x640, never upscaled
COVER_SCALE_FILTER = (
    r'scale=iw*min(1\,min(640/iw\,640/ih)):ih*min(1\,min(640/iw\,640/ih))'
)

TEMP_SUFFIX = '.tmp.mp3'
MIN_OUTPUT_SIZE = 1024

# Number of stderr lines kept for error messages
STDERR_TAIL_LINES = 20

DURATION_PATTERN = re.compile(r'Duration:\s*(\d+):(\d{2}):(\d{2}(?:\.\d+)?)')
TIME_PATTERN = re.compile(r'time=\s*(-?\d+:\d{2}:\d{2}(?:\.\d+)?)')
FPS_PATTERN = re.compile(r'fps=\s*([\d.]+)')
BITRATE_PATTERN = re.compile(r'bitrate=\s*([\d.]+)\s*kbits/s')
SIZE_PATTERN = re.compile(r'size=\s*(\d+)\s*(?:kB|KiB)')


@dataclass
class ProgressInfo:
    """Progress snapshot parsed from an FFmpeg stats line."""
    percent: Optional[float] = None
    fps: Optional[float] = None
    kbps: Optional[float] = None
    target_size: Optional[int] = None
    timemark: Optional[str] = None


@dataclass
class ConversionResult:
    """Result of converting one input file."""
    input_path: str
    output_path: str
    success: bool = True


def get_output_path(input_file: str) -> str:
    """
    Compute where the converted file for an input is written.

    MP3 inputs are written to a ``.tmp.mp3`` sibling so the source survives
    until the conversion has succeeded.

    Args:
        input_file: Path to the input media file

    Returns:
        str: Output path in the same directory as the input
    """
    directory = os.path.dirname(input_file)
    base_name = os.path.splitext(os.path.basename(input_file))[0]
    sanitized_name = sanitize_filename(base_name)

    if is_mp3_file(input_file):
        return os.path.join(directory, f"{sanitized_name}{TEMP_SUFFIX}")

    return os.path.join(directory, f"{sanitized_name}.mp3")


def output_exists(output_file: str) -> bool:
    return os.path.exists(output_file)


def _timemark_to_seconds(timemark: str) -> float:
    hours, minutes, seconds = timemark.lstrip('-').split(':')
    total = float(hours) * 3600 + float(minutes) * 60 + float(seconds)
    return -total if timemark.startswith('-') else total


def parse_duration(line: str) -> Optional[float]:
    """Parse the input duration, in seconds, from an FFmpeg header line."""
    match = DURATION_PATTERN.search(line)
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return float(hours) * 3600 + float(minutes) * 60 + float(seconds)


def parse_progress(line: str, total_duration: Optional[float] = None) -> Optional[ProgressInfo]:
    """
    Parse an FFmpeg stats line into a ProgressInfo.

    Args:
        line: One line of FFmpeg stderr output
        total_duration: Input duration in seconds, needed for the percentage

    Returns:
        ProgressInfo, or None if the line is not a stats line
    """
    time_match = TIME_PATTERN.search(line)
    if not time_match:
        return None

    timemark = time_match.group(1)
    progress = ProgressInfo(timemark=timemark)

    if total_duration:
        elapsed = _timemark_to_seconds(timemark)
        progress.percent = max(0.0, min(100.0, elapsed / total_duration * 100))

    fps_match = FPS_PATTERN.search(line)
    if fps_match:
        progress.fps = float(fps_match.group(1))

    bitrate_match = BITRATE_PATTERN.search(line)
    if bitrate_match:
        progress.kbps = float(bitrate_match.group(1))

    size_match = SIZE_PATTERN.search(line)
    if size_match:
        progress.target_size = int(size_match.group(1))

    return progress


class AudioConverter:
    """Handles conversion of single media files to normalized MP3."""

    def __init__(self, ffmpeg_path: str = 'ffmpeg', ffprobe_path: str = 'ffprobe'):
        """
        Initialize the audio converter.

        Args:
            ffmpeg_path: FFmpeg executable
            ffprobe_path: ffprobe executable
        """
        self.ffmpeg_path = ffmpeg_path
        self.ffprobe_path = ffprobe_path

    def check_dependencies(self):
        """
        Check that both FFmpeg and ffprobe can be run.

        Raises:
            DependencyError: If either tool is missing or broken.
        """
        self.check_ffmpeg_dependency()
        self.check_ffprobe_dependency()

    def check_ffmpeg_dependency(self):
        """
        Check if FFmpeg is available and accessible.

        Returns:
            str: First line of the FFmpeg version banner

        Raises:
            DependencyError: If FFmpeg is not found or not accessible.
        """
        return self._check_tool("ffmpeg", self.ffmpeg_path)

    def check_ffprobe_dependency(self):
        """Check if ffprobe, used to verify outputs and read tags, is available."""
        return self._check_tool("ffprobe", self.ffprobe_path)

    def _check_tool(self, name: str, executable: str) -> str:
        try:
            startupinfo, creationflags = _get_subprocess_startupinfo()
            result = subprocess.run(
                [executable, '-version'], capture_output=True, check=True, text=True,
                startupinfo=startupinfo, creationflags=creationflags
            )
            logging.debug(f'{name} dependency check passed')

            output = result.stdout or result.stderr or ''
            return output.split('\n')[0]

        except FileNotFoundError:
            raise DependencyError(
                name,
                f"{name} is not installed or not found in system PATH"
            )
        except subprocess.CalledProcessError as e:
            raise DependencyError(
                name,
                f"{name} is installed but not working properly: {e}"
            )

    def build_ffmpeg_command(self, input_file: str, output_file: str) -> List[str]:
        """
        Build the FFmpeg command line for one conversion.

        All source tags are copied and only the first audio stream is encoded.
        Audio inputs keep their cover art, re-encoded as a JPEG of at most
        640x640. Video inputs are reduced to their audio.

        Args:
            input_file: Path to the input media file
            output_file: Path of the MP3 to write

        Returns:
            list: Command line arguments
        """
        command = [
            self.ffmpeg_path, '-hide_banner', '-nostdin', '-y', '-i', input_file,
            '-map_metadata', '0',
            '-map', '0:a:0',
            '-id3v2_version', '3',
            '-write_id3v1', '1',
        ]

        if is_video_file(input_file):
            command.append('-vn')
        else:
            command.extend([
                '-map', '0:v?',
                '-c:v', 'mjpeg',
                '-vf', COVER_SCALE_FILTER,
                '-q:v', '2',
            ])

        command.extend([
            '-c:a', FFMPEG_OPTIONS['audio_codec'],
            '-b:a', FFMPEG_OPTIONS['bitrate'],
            '-ar', str(FFMPEG_OPTIONS['sample_rate']),
            '-ac', str(FFMPEG_OPTIONS['channels']),
            output_file,
        ])
        return command

    def convert(self, input_file: str, output_file: str, verbose: bool = False,
                on_progress: Optional[Callable[[ProgressInfo], None]] = None,
                on_start: Optional[Callable[[str], None]] = None) -> ConversionResult:
        """
        Convert one file with FFmpeg, blocking until FFmpeg exits.

        Args:
            input_file: Path to the input media file
            output_file: Path of the MP3 to write
            verbose: Relay the FFmpeg command line before starting
            on_progress: Called with a ProgressInfo for every stats line
            on_start: Receives the command line in verbose mode; logged if absent

        Returns:
            ConversionResult: The successful result

        Raises:
            ConversionError: If FFmpeg cannot be started or exits non-zero
        """
        ffmpeg_command = self.build_ffmpeg_command(input_file, output_file)

        if verbose:
            command_line = shlex.join(ffmpeg_command)
            if on_start:
                on_start(command_line)
            else:
                logging.info(f"FFmpeg: {command_line}")

        startupinfo, creationflags = _get_subprocess_startupinfo()
        try:
            process = subprocess.Popen(
                ffmpeg_command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                universal_newlines=True,
                encoding='utf-8',
                errors='replace',
                bufsize=1,
                startupinfo=startupinfo,
                creationflags=creationflags
            )
        except OSError as e:
            raise ConversionError(f"Cannot run ffmpeg: {e}", input_file) from e

        stderr_tail = deque(maxlen=STDERR_TAIL_LINES)
        total_duration = None

        # Universal newlines split FFmpeg's carriage-return stats updates into lines
        with process:
            for line in iter(process.stderr.readline, ''):
                line = line.strip()
                if not line:
                    continue

                if total_duration is None:
                    total_duration = parse_duration(line)

                progress = parse_progress(line, total_duration)
                if progress is not None:
                    if on_progress:
                        on_progress(progress)
                    continue

                logging.debug(f"FFmpeg stderr: {line}")
                stderr_tail.append(line)

            returncode = process.wait()

        if returncode != 0:
            message = f"ffmpeg exited with code {returncode}"
            if stderr_tail:
                message += ": " + "\n".join(stderr_tail)
            raise ConversionError(message, input_file, returncode=returncode)

        return ConversionResult(input_path=input_file, output_path=output_file)

    def verify_output(self, output_file: str) -> bool:
        """
        Check that a converted file is large enough and contains audio.

        Never raises; any problem is reported as False.

        Args:
            output_file: Path of the converted MP3

        Returns:
            bool: True if the file passes all checks
        """
        size = get_file_size(output_file)
        if size is None or size < MIN_OUTPUT_SIZE:
            return False

        try:
            probe_data = probe_media(output_file, self.ffprobe_path)
        except (OSError, subprocess.SubprocessError, ValueError) as e:
            logging.debug(f"Probing {output_file} failed: {e}")
            return False

        return has_audio_stream(probe_data)

    def finalize_output(self, input_file: str, output_file: str) -> str:
        """
        Move a converted file into its final place.

        For MP3 inputs the temporary output replaces the original with a
        single ``os.replace``, so a file exists at the original path at all
        times. Other outputs are already in place.

        Args:
            input_file: Path to the input media file
            output_file: Path of the converted MP3

        Returns:
            str: Final path of the converted file
        """
        if is_mp3_file(input_file) and output_file != input_file:
            os.replace(output_file, input_file)
            return input_file
        return output_file

    def cleanup_partial_output(self, output_file: str):
        """Remove a possibly partial output after a failed conversion."""
        try:
            os.remove(output_file)
        except OSError:
            pass

    def delete_file(self, file_path: str):
        os.remove(file_path)
