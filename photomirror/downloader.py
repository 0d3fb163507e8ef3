import logging
from pathlib import Path

import requests

from photomirror.errors import HTTPStatusError, SizeMismatchError, TransferError

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def download_file(url: str, expected_size: int, dest: Path) -> int:
    """
    Stream url into dest and return the number of bytes written.

    The only post-transfer check is the byte count. On failure whatever was
    written stays on disk; its hash will not match on the next run, so it
    gets fetched again then.
    """
    dest = Path(dest)
    try:
        with requests.get(url, stream=True) as resp:
            if resp.status_code != 200:
                raise HTTPStatusError(url, resp.status_code)

            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise TransferError(f"failed to create directory {dest.parent}: {e}") from e

            size = 0
            try:
                with open(dest, "wb") as f:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)
            except OSError as e:
                raise TransferError(f"error saving file {dest}: {e}") from e
    except requests.RequestException as e:
        raise TransferError(f"error downloading {url}: {e}") from e

    if size != expected_size:
        raise SizeMismatchError(url, expected_size, size)

    log.debug("fetched %s -> %s (%d bytes)", url, dest, size)
    return size
