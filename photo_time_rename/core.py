"""
Core functionality for capture-time extraction and collision-safe renaming.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Set

try:
    from PIL import Image
    from PIL.ExifTags import TAGS
except ImportError:
    print("Error: PIL (Pillow) not installed. Run: pip install Pillow")
    sys.exit(1)

try:
    import exifread
except ImportError:
    print("Error: exifread not installed. Run: pip install exifread")
    sys.exit(1)


EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
DEFAULT_STEM_FORMAT = "%Y-%m-%d_%H-%M-%S"

# Pointer from IFD0 to the Exif sub-IFD holding DateTimeOriginal
EXIF_IFD_POINTER = 0x8769

SOURCE_EXIF = "exif"
SOURCE_FILESYSTEM = "filesystem"

RENAMED = "renamed"
PLANNED = "planned"
SKIPPED = "skipped"
FAILED = "failed"


class RenameToolError(Exception):
    """Base error for the project."""


class UsageError(RenameToolError):
    pass


class StatFailure(RenameToolError):
    pass


class RenameFailure(RenameToolError):
    pass


class ResolvedTimestamp(NamedTuple):
    """Capture timestamp together with where it was read from."""
    timestamp: datetime
    source: str


class RenameResult(NamedTuple):
    """Outcome of processing a single directory entry."""
    source: Path
    destination: Optional[Path]
    status: str
    reason: str = ""


def parse_exif_datetime(value) -> Optional[datetime]:
    """Parse an EXIF 'YYYY:MM:DD HH:MM:SS' value, None if it is not one."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    text = str(value).strip("\x00").strip()
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def file_birth_time(filepath: Path) -> datetime:
    """
    Return the file's creation time as naive local time.

    Uses st_birthtime where the platform reports it and the modification
    time otherwise.

    Raises:
        StatFailure: if the file cannot be stat'ed
    """
    try:
        st = os.stat(filepath)
    except OSError as e:
        raise StatFailure(f"Failed to stat {filepath}: {e}") from e

    birth_time = getattr(st, "st_birthtime", None)
    if birth_time is None:
        birth_time = st.st_mtime
    return datetime.fromtimestamp(birth_time)


def format_stem(timestamp: datetime, stem_format: str = DEFAULT_STEM_FORMAT) -> str:
    """Convert a timestamp into a filename stem."""
    if stem_format == DEFAULT_STEM_FORMAT:
        # strftime does not zero-pad years below 1000 on every platform
        return (f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d}_"
                f"{timestamp.hour:02d}-{timestamp.minute:02d}-{timestamp.second:02d}")
    return timestamp.strftime(stem_format)


def validate_stem_format(stem_format: str) -> None:
    """Reject patterns that cannot produce a usable filename stem."""
    sample = format_stem(datetime(2000, 1, 2, 3, 4, 5), stem_format)
    if not sample.strip():
        raise ValueError(f"Format {stem_format!r} produces an empty filename")
    if "/" in sample or os.sep in sample:
        raise ValueError(f"Format {stem_format!r} produces a path separator")


def file_extension(filepath: Path) -> str:
    """Extension kept on rename; a dotfile such as '.jpg' is all extension."""
    if filepath.suffix:
        return filepath.suffix
    if filepath.name.startswith("."):
        return filepath.name
    return ""


class ClaimTable:
    """
    Destination names reserved during one run.

    Every file with stem S is first offered ``S_1<ext>``. When that name is
    already claimed in this run or exists on disk, the suffix is bumped
    (``S_2``, ``S_3`` ...) until a free name is found. A name equal to the
    file's own current path counts as free, in which case the file needs no
    rename at all. Names of files already moved away in this run, or planned
    to be in a dry run, are free again.
    """

    def __init__(self):
        self.counts: Dict[Path, int] = {}
        self.claimed: Set[Path] = set()
        self.vacated: Set[Path] = set()

    @staticmethod
    def candidate(source: Path, stem: str, count: int) -> Path:
        return source.parent / f"{stem}_{count}{file_extension(source)}"

    def is_taken(self, path: Path) -> bool:
        return path in self.claimed or (path not in self.vacated and os.path.lexists(path))

    def vacate(self, source: Path) -> None:
        """Mark ``source`` as moved away."""
        self.vacated.add(source)

    def reserve(self, source: Path, stem: str) -> Optional[Path]:
        """
        Reserve the destination path for ``source`` renamed to ``stem``.

        Returns:
            The reserved path, or None when ``source`` already carries the
            name it would be given. Nothing is recorded in that case.
        """
        base_path = self.candidate(source, stem, 1)
        if base_path == source:
            return None

        count = 1
        destination = base_path
        while destination != source and self.is_taken(destination):
            count += 1
            destination = self.candidate(source, stem, count)

        if destination == source:
            return None

        self.counts[base_path] = count
        self.claimed.add(destination)
        return destination


class PhotoRenamer:
    """
    Renames the files of a directory after their capture time.

    Features:
    - Reads EXIF DateTimeOriginal with Pillow, then exifread
    - Falls back to the filesystem creation time
    - Resolves name collisions with numeric suffixes within a run
    - Reports per-file failures without aborting the batch
    """

    def __init__(self, dry_run: bool = False, stem_format: str = DEFAULT_STEM_FORMAT,
                 use_metadata: bool = True, use_fallback: bool = True,
                 verbose: bool = False):
        """
        Initialize the PhotoRenamer.

        Args:
            dry_run: If True, only show what would be renamed without actual changes
            stem_format: strftime pattern for the new filename stem
            use_metadata: Read the capture time from EXIF metadata
            use_fallback: Use the filesystem creation time when EXIF has none
            verbose: Print per-file diagnostics
        """
        if not use_metadata and not use_fallback:
            raise ValueError("At least one timestamp source must be enabled")
        validate_stem_format(stem_format)

        self.dry_run = dry_run
        self.stem_format = stem_format
        self.use_metadata = use_metadata
        self.use_fallback = use_fallback
        self.verbose = verbose

    def _read_with_pil(self, filepath: Path):
        """Return the raw DateTimeOriginal value using Pillow."""
        try:
            with Image.open(filepath) as img:
                exif_ifd = img.getexif().get_ifd(EXIF_IFD_POINTER)
                for tag_id, value in exif_ifd.items():
                    if TAGS.get(tag_id, tag_id) == "DateTimeOriginal":
                        return value
        except Exception as e:
            if self.verbose:
                print(f"Pillow could not read {filepath.name}: {e}")
        return None

    def _read_with_exifread(self, filepath: Path):
        """Return the raw DateTimeOriginal value using exifread."""
        try:
            with open(filepath, 'rb') as f:
                tags = exifread.process_file(f, details=False, stop_tag="DateTimeOriginal")
            if "EXIF DateTimeOriginal" in tags:
                return str(tags["EXIF DateTimeOriginal"])
        except Exception as e:
            if self.verbose:
                print(f"exifread could not read {filepath.name}: {e}")
        return None

    def read_capture_time(self, filepath: Path) -> Optional[datetime]:
        """Read the capture time from embedded metadata, None if unavailable."""
        for reader in (self._read_with_pil, self._read_with_exifread):
            value = reader(filepath)
            if value is None:
                continue
            capture_time = parse_exif_datetime(value)
            if capture_time is not None:
                return capture_time
        return None

    def resolve_timestamp(self, filepath: Path) -> Optional[ResolvedTimestamp]:
        """
        Produce the timestamp a file should be named after.

        Returns None only when the filesystem fallback is disabled and the
        file carries no usable capture time.

        Raises:
            StatFailure: if the fallback is needed and stat fails
        """
        if self.use_metadata:
            capture_time = self.read_capture_time(filepath)
            if capture_time is not None:
                return ResolvedTimestamp(capture_time, SOURCE_EXIF)
            if self.verbose:
                print(f"No capture time in {filepath.name}")

        if not self.use_fallback:
            return None
        return ResolvedTimestamp(file_birth_time(filepath), SOURCE_FILESYSTEM)

    def list_files(self, directory: Path) -> List[Path]:
        """List the regular files of ``directory`` in filesystem order."""
        with os.scandir(directory) as it:
            entries = list(it)
        return [Path(entry.path) for entry in entries if entry.is_file()]

    def rename_file(self, source: Path, destination: Path) -> None:
        try:
            os.rename(source, destination)
        except OSError as e:
            raise RenameFailure(f"Could not rename {source.name} -> {destination.name}: {e}") from e

    def process_file(self, filepath: Path, claims: ClaimTable) -> RenameResult:
        """Resolve, reserve and rename a single file."""
        try:
            resolved = self.resolve_timestamp(filepath)
        except StatFailure as e:
            print(f"Warning: {e}")
            return RenameResult(filepath, None, FAILED, str(e))

        if resolved is None:
            if self.verbose:
                print(f"Skipping {filepath.name} (no capture time)")
            return RenameResult(filepath, None, SKIPPED, "no capture time")

        stem = format_stem(resolved.timestamp, self.stem_format)
        destination = claims.reserve(filepath, stem)
        if destination is None:
            if self.verbose:
                print(f"Skipping {filepath.name} (no change needed)")
            return RenameResult(filepath, filepath, SKIPPED, "already named")

        print(f"{'WOULD RENAME' if self.dry_run else 'RENAMING'}: "
              f"{filepath.name} -> {destination.name}")

        if self.dry_run:
            claims.vacate(filepath)
            return RenameResult(filepath, destination, PLANNED, resolved.source)

        try:
            self.rename_file(filepath, destination)
        except RenameFailure as e:
            print(f"Warning: {e}")
            return RenameResult(filepath, destination, FAILED, str(e))
        claims.vacate(filepath)
        return RenameResult(filepath, destination, RENAMED, resolved.source)

    def process_directory(self, directory: Path) -> List[RenameResult]:
        """
        Rename every regular file in ``directory``.

        Entries are listed once before any rename takes place. Renames
        already performed are kept when a later one fails.

        Raises:
            UsageError: if ``directory`` is missing or not a directory
        """
        directory = Path(directory)
        if not directory.exists():
            raise UsageError(f"Not found: {directory}")
        if not directory.is_dir():
            raise UsageError(f"The specified path ({directory}) is not a directory")

        claims = ClaimTable()
        return [self.process_file(filepath, claims) for filepath in self.list_files(directory)]

    @staticmethod
    def count(results: List[RenameResult], status: str = RENAMED) -> int:
        return sum(1 for result in results if result.status == status)

    def print_report(self, results: List[RenameResult]) -> None:
        """Print failed files, followed by the final count."""
        failed = [result for result in results if result.status == FAILED]
        if failed:
            print(f"\n{len(failed)} files could not be renamed:")
            for result in failed:
                print(f"  {result.source.name}: {result.reason}")

        if self.dry_run:
            print(f"Would rename {self.count(results, PLANNED)} files")
        else:
            print(f"Processed {self.count(results)} files")
