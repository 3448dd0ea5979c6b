"""
Tests for directory scanning.
"""

import os
import sys
from unittest.mock import patch

import pytest

from musicconvert.utils.scanner import (
    scan_directory,
    collect_audio_files,
    directory_exists,
    is_audio_file,
    is_video_file,
    is_convertible_file,
    is_mp3_file
)


class TestClassification:
    """Test cases for extension classification."""

    def test_is_audio_file(self):
        test_cases = [
            ('song.mp3', True),
            ('song.flac', True),
            ('song.WAV', True),
            ('song.aiff', True),
            ('song.ape', True),
            ('song.opus', True),
            ('video.mp4', False),
            ('notes.txt', False),
            ('noextension', False),
        ]

        for filename, expected in test_cases:
            assert is_audio_file(filename) == expected, filename

    def test_is_video_file(self):
        for filename in ('video.mp4', 'clip.WEBM', 'movie.mkv', 'old.avi', 'phone.mov'):
            assert is_video_file(filename)
        assert not is_video_file('song.flac')

    def test_is_convertible_file(self):
        assert is_convertible_file('/music/a.flac')
        assert is_convertible_file('/music/b.mp4')
        assert not is_convertible_file('/music/cover.jpg')
        assert not is_convertible_file('/music/.DS_Store')

    def test_is_mp3_file(self):
        assert is_mp3_file('a.mp3')
        assert is_mp3_file('A.MP3')
        assert not is_mp3_file('a.mp3.flac')


class TestScanDirectory:
    """Test cases for scan_directory and collect_audio_files."""

    def test_scan_finds_nested_files(self, temp_dir, make_file):
        make_file(os.path.join(temp_dir, 'b.flac'))
        make_file(os.path.join(temp_dir, 'album', 'a.mp3'))
        make_file(os.path.join(temp_dir, 'album', 'deeper', 'c.mkv'))
        make_file(os.path.join(temp_dir, 'album', 'cover.jpg'))

        files = collect_audio_files(temp_dir)

        assert files == sorted([
            os.path.join(temp_dir, 'album', 'a.mp3'),
            os.path.join(temp_dir, 'album', 'deeper', 'c.mkv'),
            os.path.join(temp_dir, 'b.flac'),
        ])

    def test_scan_returns_absolute_paths(self, temp_dir, monkeypatch, make_file):
        make_file(os.path.join(temp_dir, 'song.ogg'))
        monkeypatch.chdir(temp_dir)

        files = collect_audio_files('.')

        assert files == [os.path.join(os.getcwd(), 'song.ogg')]
        assert all(os.path.isabs(path) for path in files)

    def test_scan_skips_hidden_entries(self, temp_dir, make_file):
        make_file(os.path.join(temp_dir, '.DS_Store'))
        make_file(os.path.join(temp_dir, '.hidden.mp3'))
        make_file(os.path.join(temp_dir, '.cache', 'inside.flac'))
        make_file(os.path.join(temp_dir, 'visible.flac'))

        files = collect_audio_files(temp_dir)

        assert files == [os.path.join(temp_dir, 'visible.flac')]

    def test_scan_is_lazy(self, temp_dir, make_file):
        make_file(os.path.join(temp_dir, 'one.flac'))

        scanner = scan_directory(temp_dir)

        assert next(scanner) == os.path.join(temp_dir, 'one.flac')
        with pytest.raises(StopIteration):
            next(scanner)

    def test_scan_is_deterministic(self, temp_dir, make_file):
        for name in ('z.mp3', 'a.flac', 'M.wav', 'sub/b.ogg', 'sub/a.m4a'):
            make_file(os.path.join(temp_dir, name))

        assert collect_audio_files(temp_dir) == collect_audio_files(temp_dir)
        assert collect_audio_files(temp_dir) == sorted(collect_audio_files(temp_dir))

    def test_scan_order_independent_of_listing_order(self, temp_dir, make_file):
        for name in ('c.flac', 'a.flac', 'b.flac'):
            make_file(os.path.join(temp_dir, name))

        real_scandir = os.scandir

        def reversed_scandir(path):
            class ReversedListing:
                def __enter__(self):
                    self.it = real_scandir(path)
                    return iter(sorted(self.it, key=lambda e: e.name, reverse=True))

                def __exit__(self, *exc_info):
                    self.it.close()
                    return False
            return ReversedListing()

        with patch('musicconvert.utils.scanner.os.scandir', reversed_scandir):
            files = collect_audio_files(temp_dir)

        assert [os.path.basename(f) for f in files] == ['a.flac', 'b.flac', 'c.flac']

    def test_scan_missing_directory_yields_nothing(self):
        assert collect_audio_files('/nonexistent/directory') == []

    @pytest.mark.skipif(sys.platform == 'win32' or not hasattr(os, 'geteuid') or os.geteuid() == 0,
                        reason="permission bits are not enforced")
    def test_scan_skips_unreadable_directory(self, temp_dir, make_file):
        locked = os.path.join(temp_dir, 'locked')
        make_file(os.path.join(locked, 'secret.flac'))
        make_file(os.path.join(temp_dir, 'open.flac'))
        os.chmod(locked, 0)

        try:
            files = collect_audio_files(temp_dir)
        finally:
            os.chmod(locked, 0o755)

        assert files == [os.path.join(temp_dir, 'open.flac')]

    @pytest.mark.skipif(not hasattr(os, 'symlink'), reason="symlinks not supported")
    def test_scan_does_not_follow_symlinks(self, temp_dir, make_file):
        target = os.path.join(temp_dir, 'real')
        make_file(os.path.join(target, 'song.flac'))
        try:
            os.symlink(target, os.path.join(temp_dir, 'link'))
        except OSError:
            pytest.skip("cannot create symlinks")

        files = collect_audio_files(temp_dir)

        assert files == [os.path.join(target, 'song.flac')]


class TestDirectoryExists:

    def test_directory_exists(self, temp_dir):
        assert directory_exists(temp_dir)

    def test_directory_exists_for_file(self, temp_dir, make_file):
        path = make_file(os.path.join(temp_dir, 'song.flac'))
        assert not directory_exists(path)

    def test_directory_exists_missing(self):
        assert not directory_exists('/nonexistent/directory')
