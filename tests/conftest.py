"""
Pytest configuration and fixtures for music-convert tests.
"""

import io
import os
import shutil
import subprocess
import tempfile

import pytest

from musicconvert.core.converter import AudioConverter

# FFmpeg stderr for a successful 10 second conversion
FFMPEG_STDERR = (
    "Input #0, flac, from 'input.flac':\n"
    "  Duration: 00:00:10.00, start: 0.000000, bitrate: 1000 kb/s\n"
    "Output #0, mp3, to 'output.mp3':\n"
    "size=     128KiB time=00:00:05.00 bitrate= 209.7kbits/s speed=10x\r"
    "size=     384KiB time=00:00:10.00 bitrate= 314.6kbits/s speed=10x\n"
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


def write_file(path, data=b'\x00' * 2048):
    """Create a file (and its parent directories) with the given bytes."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
    return path


class FakeFFmpegProcess:
    """Stands in for a subprocess.Popen object running FFmpeg."""

    def __init__(self, command, stderr_output, returncode):
        self.args = command
        self.stderr = io.StringIO(stderr_output, newline=None)
        self.returncode = None
        self._exit_code = returncode

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.stderr.close()
        self.wait()
        return False

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        self.returncode = self._exit_code
        return self.returncode


class FakeMediaTools:
    """
    Simulates FFmpeg and ffprobe on the real filesystem.

    A conversion writes an output file and carries the source's tags over to
    it, like ``-map_metadata 0`` does. Probing returns one audio stream and
    the tags recorded for the path.
    """

    def __init__(self):
        self.commands = []
        self.tags_by_path = {}
        self.failures = {}
        self.output_size = 4096
        self.stderr_output = FFMPEG_STDERR

    def add_source(self, path, tags=None, data=b'\x00' * 2048):
        write_file(path, data)
        self.tags_by_path[path] = dict(tags or {})
        return path

    def fail_on(self, input_name, message):
        """Make the conversion of a file fail with an FFmpeg error message."""
        self.failures[input_name] = message

    def popen(self, command, **kwargs):
        self.commands.append(command)
        input_file = command[command.index('-i') + 1]
        output_file = command[-1]

        message = self.failures.get(os.path.basename(input_file))
        if message is not None:
            # FFmpeg leaves a truncated file behind when it fails mid-way
            write_file(output_file, b'\x00' * 100)
            return FakeFFmpegProcess(command, f"{message}\n", 1)

        write_file(output_file, b'\x00' * self.output_size)
        self.tags_by_path[output_file] = dict(self.tags_by_path.get(input_file, {}))
        return FakeFFmpegProcess(command, self.stderr_output, 0)

    def probe(self, file_path, ffprobe_path='ffprobe'):
        if not os.path.exists(file_path):
            raise subprocess.CalledProcessError(1, [ffprobe_path, file_path])
        return {
            'streams': [{'codec_type': 'audio', 'codec_name': 'mp3'}],
            'format': {'tags': self.tags_by_path.get(file_path, {})},
        }


@pytest.fixture
def media_tools(monkeypatch):
    """Replace FFmpeg and ffprobe with FakeMediaTools."""
    tools = FakeMediaTools()
    monkeypatch.setattr('musicconvert.core.converter.subprocess.Popen', tools.popen)
    monkeypatch.setattr('musicconvert.core.converter.probe_media', tools.probe)
    monkeypatch.setattr('musicconvert.utils.file_utils.probe_media', tools.probe)
    monkeypatch.setattr(AudioConverter, 'check_ffmpeg_dependency', lambda self: 'ffmpeg version test')
    monkeypatch.setattr(AudioConverter, 'check_ffprobe_dependency', lambda self: 'ffprobe version test')
    return tools


@pytest.fixture
def make_file():
    """Factory fixture creating files with placeholder content."""
    return write_file
