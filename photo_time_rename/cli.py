#!/usr/bin/env python3
"""
Command-line interface for photo_time_rename.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .core import DEFAULT_STEM_FORMAT, PhotoRenamer, UsageError

USAGE_MESSAGE = "Please specify the directory containing the photos to rename"


def normalize_path(raw_path: str) -> Path:
    """Expand a leading '~' against $HOME and make the path absolute."""
    path = Path(raw_path)
    if raw_path.startswith("~"):
        path = Path(os.environ["HOME"]).joinpath(*path.parts[1:])
    return path.absolute()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo_time_rename",
        description="Rename photos after the time they were taken",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  photo_time_rename ~/Pictures/Holiday
  photo_time_rename --dry-run /Volumes/Card/DCIM/100CANON

The tool will:
1. Read the EXIF DateTimeOriginal of every file in the directory
2. Fall back to the file creation time when there is none
3. Rename files as: YYYY-MM-DD_HH-MM-SS_N.ext

Files taken in the same second get increasing suffixes (_1, _2, ...).
        """
    )

    parser.add_argument(
        'directory',
        help='Directory containing the photos to rename'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be renamed without actually renaming files'
    )

    parser.add_argument(
        '--format',
        dest='stem_format',
        default=DEFAULT_STEM_FORMAT,
        help='strftime pattern for the new names (default: %%Y-%%m-%%d_%%H-%%M-%%S)'
    )

    parser.add_argument(
        '--no-fallback',
        dest='use_fallback',
        action='store_false',
        help='Skip files without EXIF capture time instead of using the file creation time'
    )

    parser.add_argument(
        '--no-exif',
        dest='use_metadata',
        action='store_false',
        help='Ignore EXIF metadata and use the file creation time only'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print why files are skipped'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the photo_time_rename command."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        if e.code:
            print(USAGE_MESSAGE)
            sys.exit(1)
        return

    try:
        renamer = PhotoRenamer(
            dry_run=args.dry_run,
            stem_format=args.stem_format,
            use_metadata=args.use_metadata,
            use_fallback=args.use_fallback,
            verbose=args.verbose,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    path = normalize_path(args.directory)
    if not path.exists():
        print(f"\nNot found: {path}")
        sys.exit(1)
    if not path.is_dir():
        print(f"The specified path ({path}) is not a directory")
        sys.exit(1)

    print(f"Processing photos in {path}")
    if args.dry_run:
        print("Note: This is a dry run. No files will be actually renamed.")

    try:
        results = renamer.process_directory(path)
    except UsageError as e:
        print(e)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)

    renamer.print_report(results)


if __name__ == '__main__':
    main()
