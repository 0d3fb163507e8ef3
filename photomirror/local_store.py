import hashlib
import logging
import os
from pathlib import Path
from typing import Dict, Iterator

from photomirror.errors import ScanError, UnmappableItemError
from photomirror.smugmug_api import RemoteItem

log = logging.getLogger(__name__)

# Descriptor for directories in the local map. Files map to a 32-char hex
# digest, so the two never collide.
DIRECTORY = "directory"

CHUNK_SIZE = 1024 * 1024


def file_md5(path: Path) -> str:
    """
    Stream a file through MD5 and return the lowercase hex digest.
    """
    h = hashlib.md5()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def _raise_scan_error(err: OSError):
    log.error("error reading %s: %s", err.filename, err)
    raise ScanError(f"error walking local file system: {err}") from err


def scan_local_tree(root: Path) -> Dict[str, str]:
    """
    Map every path under root (relative, '/'-separated) to either the MD5
    of its content or DIRECTORY. The root itself is not included.
    Raises ScanError if anything cannot be read.
    """
    root = Path(root)
    local_files: Dict[str, str] = {}
    if not root.exists():
        return local_files

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_scan_error):
        base = Path(dirpath)
        for name in dirnames:
            local_files[(base / name).relative_to(root).as_posix()] = DIRECTORY
        for name in filenames:
            path = base / name
            try:
                digest = file_md5(path)
            except OSError as e:
                log.error("error reading %s: %s", path, e)
                raise ScanError(f"error reading {path}: {e}") from e
            local_files[path.relative_to(root).as_posix()] = digest

    return local_files


def compute_local_path(item: RemoteItem) -> str:
    """
    category/[subcategory/]album/filename for a remote item. Empty
    hierarchy segments are left out, the same way a directory walk would
    see the result.
    """
    if not item.filename:
        raise UnmappableItemError(
            f"image with no filename: ID={item.id} Key={item.key} Album={item.album}"
        )
    parts = [p for p in (item.category, item.subcategory, item.album, item.filename) if p]
    if any(p in (".", "..") for p in parts):
        raise UnmappableItemError(
            f"image path has a relative segment: ID={item.id} Key={item.key} Path={'/'.join(parts)}"
        )
    return "/".join(parts)


def parent_dirs(rel_path: str) -> Iterator[str]:
    """
    Yield each ancestor directory of a relative path, nearest first.
    """
    parts = rel_path.split("/")[:-1]
    while parts:
        yield "/".join(parts)
        parts.pop()


def delete_local_file(path: Path):
    log.info("removing file %s", path)
    os.remove(path)


def delete_local_dir(path: Path):
    log.info("removing directory %s", path)
    os.rmdir(path)
