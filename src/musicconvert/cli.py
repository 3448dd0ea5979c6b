"""
Command-line interface for music-convert.
"""

import argparse
import sys
import logging

from . import __version__
from .core.processor import BatchConverter, ConversionOptions
from .exceptions import MusicConvertError


def setup_logging(verbose=False, log_file=None):
    """
    Sets up the logging configuration for the application.

    Args:
        verbose (bool): Show debug output (FFmpeg command lines, renames).
        log_file (str): Optional path of a log file to write as well.
    """
    level = logging.DEBUG if verbose else logging.INFO

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
        )
        handlers.append(file_handler)

    # The console handler gets the plain '%(message)s' format
    logging.basicConfig(
        level=logging.DEBUG if log_file else level,
        format='%(message)s',
        handlers=handlers,
        force=True
    )


def parse_arguments(argv=None):
    """
    Parses command line arguments for the application.

    Args:
        argv (list): Arguments to parse; defaults to sys.argv[1:].

    Returns:
        argparse.Namespace: Parsed command line arguments.
    """
    parser = argparse.ArgumentParser(
        prog="music-convert",
        description="Convert audio files to MP3 (320kbps, 44.1kHz, Stereo)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  music-convert ~/Music
  music-convert ~/Music --dry-run
  music-convert ~/Downloads --keep-original --verbose

Audio formats: MP3, FLAC, WAV, AAC, OGG, WMA, M4A, AIFF, APE, OPUS
Video formats (audio is extracted): MP4, WEBM, MKV, AVI, MOV
        """
    )

    parser.add_argument(
        'directory',
        help='Directory to scan for audio files'
    )

    parser.add_argument(
        '--dry-run', '-d',
        action='store_true',
        help='Show what would be converted without converting'
    )

    parser.add_argument(
        '--keep-original', '-k',
        action='store_true',
        help='Keep original files after conversion'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed FFmpeg output'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only print the final summary'
    )

    parser.add_argument(
        '--log-file',
        help='Also write a detailed log to this file'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'music-convert {__version__}'
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the CLI application."""
    args = parse_arguments(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    options = ConversionOptions(
        dry_run=args.dry_run,
        keep_original=args.keep_original,
        verbose=args.verbose,
        quiet=args.quiet
    )

    try:
        summary = BatchConverter(options).convert_directory(args.directory)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        sys.exit(130)
    except MusicConvertError as e:
        print(f"Error: {e.get_user_message()}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logging.exception(f'Unexpected error: {e}')
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(1 if summary.has_failures else 0)


if __name__ == '__main__':
    main()
