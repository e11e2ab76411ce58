"""
Builds the deployment archive for the function source.
"""

import io
import logging
import os
import zipfile
from pathlib import Path

from errors import PackagingError

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = {"__pycache__", ".pytest_cache"}
EXCLUDED_SUFFIXES = (".pyc", ".pyo")


def build_archive(source_dir: Path) -> bytes:
    """
    Zip the contents of source_dir in memory.

    Paths inside the archive are relative to source_dir, so `src/index.py`
    becomes `index.py` at the archive root.

    Args:
        source_dir: Directory holding the function source

    Returns:
        Zip archive bytes

    Raises:
        FileNotFoundError: If source_dir does not exist
        PackagingError: If source_dir holds no files
    """
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    buffer = io.BytesIO()
    file_count = 0

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zipf:
        for root, dirs, files in os.walk(source_dir):
            dirs[:] = sorted(d for d in dirs if d not in EXCLUDED_DIRS)
            for name in sorted(files):
                if name.endswith(EXCLUDED_SUFFIXES):
                    continue
                file_path = os.path.join(root, name)
                archive_path = os.path.relpath(file_path, source_dir)
                zipf.write(file_path, archive_path)
                file_count += 1

    if file_count == 0:
        raise PackagingError(f"Nothing to package in {source_dir}")

    data = buffer.getvalue()
    logger.info(f"Packaged {file_count} file(s) from {source_dir} ({len(data)} bytes)")
    return data
