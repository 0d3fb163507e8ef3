import logging
from pathlib import Path
from typing import Dict

from photomirror.auth import AuthManager
from photomirror.downloader import download_file
from photomirror.errors import CleanupError, PhotoMirrorError
from photomirror.local_store import (
    DIRECTORY,
    compute_local_path,
    delete_local_dir,
    delete_local_file,
    parent_dirs,
    scan_local_tree,
)
from photomirror import smugmug_api as api
from photomirror.smugmug_api import RemoteItem
from photomirror.stats import TransferStats, format_size

log = logging.getLogger(__name__)

UNCHANGED = "unchanged"
NEW = "new"
CHANGED = "changed"


def _mark_in_use(pending: Dict[str, str], path: str):
    pending.pop(path, None)
    for parent in parent_dirs(path):
        pending.pop(parent, None)


def reconcile_item(
    item: RemoteItem,
    pending: Dict[str, str],
    root: Path,
    stats: TransferStats,
    dry_run: bool = False,
) -> str:
    """
    Classify one remote item against the pending local map and download it
    if it is new or changed. The item's path and every directory above it
    are dropped from `pending` before any transfer is attempted.
    """
    path = compute_local_path(item)
    local = pending.get(path)

    if local == item.md5:
        log.info("    skipping unchanged file %s", path)
        _mark_in_use(pending, path)
        return UNCHANGED

    status = NEW if local is None else CHANGED
    _mark_in_use(pending, path)

    if dry_run:
        log.info("    %s: dry run, not downloading (%s)", path, status)
        stats.record(item.size)
        return status

    size = download_file(item.url, item.size, Path(root) / path)
    log.info("    %s: downloaded %s (%s)", path, format_size(size), status)
    stats.record(size)
    return status


def cleanup_orphans(
    pending: Dict[str, str],
    root: Path,
    delete: bool = True,
    dry_run: bool = False,
) -> int:
    """
    Remove every path left in `pending`: files first, then directories
    deepest first. Returns the number of entries removed (or that would
    be, in a dry run). Stops at the first failure with CleanupError.
    """
    if not delete:
        return 0

    root = Path(root)
    files = sorted(p for p, desc in pending.items() if desc != DIRECTORY)
    dirs = sorted(
        (p for p, desc in pending.items() if desc == DIRECTORY),
        key=lambda p: (-p.count("/"), p),
    )

    for rel in files:
        if dry_run:
            log.info("dry run, not removing file %s", rel)
            continue
        try:
            delete_local_file(root / rel)
        except OSError as e:
            raise CleanupError(f"error removing file {root / rel}: {e}") from e

    for rel in dirs:
        if dry_run:
            log.info("dry run, not removing directory %s", rel)
            continue
        try:
            delete_local_dir(root / rel)
        except OSError as e:
            raise CleanupError(f"error removing directory {root / rel}: {e}") from e

    removed = len(files) + len(dirs)
    log.info("removed %d files and directories", removed)
    return removed


class PhotoMirror:
    """
    Orchestrates one mirroring run:
     - log in
     - scan the local tree
     - walk albums and images, downloading what is new or changed
     - remove what the server no longer has
    """

    def __init__(self, config: dict):
        self.config = config
        self.root = Path(config["dir"])
        self.dry_run = bool(config.get("dry", False))
        self.delete = bool(config.get("delete", True))

        self.auth_manager = AuthManager(config["apikey"], config["email"], config["password"])
        self.session = None

        # Paths seen locally and not (yet) matched by any remote item.
        self.pending: Dict[str, str] = {}
        self.stats = TransferStats()
        self.removed = 0

    def authenticate(self):
        self.session = self.auth_manager.authenticate()

    def scan_local(self):
        log.info("Scanning local file system, this may take some time")
        self.pending = scan_local_tree(self.root)
        log.info("Found %d local files and directories", len(self.pending))

    def sync_albums(self):
        for album in api.list_albums(self.session):
            log.info("Processing album %s in category %s [%s]", album.title, album.category, album.url)
            for item in api.list_images(self.session, album):
                try:
                    reconcile_item(item, self.pending, self.root, self.stats, self.dry_run)
                except PhotoMirrorError as e:
                    log.error(
                        "Error processing image %s from album %s in category %s: %s",
                        item.filename or f"ID={item.id}", album.title, album.category, e,
                    )
                    raise

    def cleanup_local(self):
        self.removed = cleanup_orphans(self.pending, self.root, self.delete, self.dry_run)
        self.pending = {}

    def run(self) -> TransferStats:
        self.authenticate()
        self.scan_local()
        self.sync_albums()
        self.cleanup_local()
        return self.stats
