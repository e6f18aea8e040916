import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .adapters.java_adapter import JavaAdapter
from .config import AutofillConfig
from .errors import FileProcessingError, JavaParseError, TraversalError
from .synthesizer import synthesize

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    files_found: int = 0
    files_written: int = 0
    files_excluded: int = 0
    files_skipped: int = 0
    files_failed: int = 0

    @property
    def ok(self) -> bool:
        return self.files_failed == 0


def autofill_source(
    code: str,
    config: AutofillConfig,
    source_file: Optional[str] = None,
    adapter: Optional[JavaAdapter] = None,
) -> Tuple[bool, str]:
    """
    Parse -> synthesize -> render for one in-memory unit.
    Raises JavaParseError when the code cannot be parsed.
    """
    adapter = adapter or JavaAdapter()
    unit = adapter.build_unit(code, source_file)
    if not unit.declarations:
        return False, code
    if not synthesize(unit, config):
        return False, code
    return True, adapter.render(unit)


def _write_atomic(path: Path, text: str) -> None:
    """Write to a sibling temp file, then rename it over `path`."""
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def process_file(path: Path, config: AutofillConfig, adapter: Optional[JavaAdapter] = None) -> bool:
    """
    Rewrite one file in place. Returns True when the file was written.

    The file is only touched when a comment changed AND the rendered text
    differs from what is on disk.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            original = f.read()

        modified, updated = autofill_source(original, config, str(path), adapter)
        if not modified or updated == original:
            return False

        _write_atomic(path, updated)
    except JavaParseError:
        raise
    except Exception as e:
        raise FileProcessingError(str(path), e) from e

    logger.info("Processed %s", path)
    return True


def _raise_traversal(err: OSError) -> None:
    raise TraversalError(f"Cannot read directory {err.filename}: {err.strerror or err}") from err


def iter_java_files(root: Path) -> Iterator[Path]:
    """All *.java files under root, in a stable (sorted) order."""
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_traversal):
        dirnames.sort()
        for name in sorted(filenames):
            if name.endswith(".java"):
                yield Path(dirpath) / name


def process_directory(config: AutofillConfig, adapter: Optional[JavaAdapter] = None) -> RunSummary:
    if config.source_dir is None:
        raise TraversalError("No source directory configured")
    root = Path(config.source_dir)
    if not root.exists():
        raise TraversalError(f"Source directory does not exist: {root}")
    if not root.is_dir():
        raise TraversalError(f"Source path is not a directory: {root}")

    logger.info("Scanning %s", root)
    disabled = config.disabled_phases()
    if disabled:
        logger.info("Disabled: %s", ", ".join(disabled))

    adapter = adapter or JavaAdapter()
    summary = RunSummary()

    for path in iter_java_files(root):
        summary.files_found += 1
        if config.is_excluded(path):
            logger.info("Excluded %s", path)
            summary.files_excluded += 1
            continue
        try:
            if process_file(path, config, adapter):
                summary.files_written += 1
        except JavaParseError as e:
            logger.warning("Skipping %s: %s", path, e)
            summary.files_skipped += 1
        except FileProcessingError as e:
            logger.error("%s", e, exc_info=e.cause)
            summary.files_failed += 1

    if summary.files_found == 0:
        logger.info("No Java files found under %s", root)
    elif summary.files_written == 0:
        logger.info("No changes needed (%d files checked)", summary.files_found)
    else:
        logger.info("Updated %d of %d files", summary.files_written, summary.files_found)
    return summary
