import logging
from typing import List, NamedTuple, Optional

import requests

from photomirror.auth import Session
from photomirror.config import API_URL
from photomirror.errors import EnumerationError

log = logging.getLogger(__name__)


class RemoteAlbum(NamedTuple):
    id: int
    key: str
    title: str
    category: str
    subcategory: Optional[str]
    url: str


class RemoteItem(NamedTuple):
    """
    One image as reported by the catalogue. Matching is done on the local
    path it maps to, never on id/key.
    """
    id: int
    key: str
    category: str
    subcategory: Optional[str]
    album: str
    filename: str
    md5: str
    size: int
    url: str


def call(session: Session, method: str, **params) -> dict:
    """
    Call one API method with the session attached and return the decoded
    JSON reply. Raises EnumerationError on transport, status or API errors.
    """
    query = {"method": method, "SessionID": session.session_id}
    query.update(params)
    try:
        resp = requests.get(API_URL, params=query)
    except requests.RequestException as e:
        raise EnumerationError(f"{method} error: {e}") from e

    if resp.status_code != 200:
        raise EnumerationError(f"{method} error: status {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as e:
        raise EnumerationError(f"{method} error: malformed reply: {e}") from e

    if data.get("stat") != "ok":
        raise EnumerationError(f"{method} error: {data.get('message', 'unknown error')} (code {data.get('code')})")
    return data


def list_albums(session: Session) -> List[RemoteAlbum]:
    """
    List every album of the logged-in user, with its category and
    optional subcategory.
    """
    data = call(session, "smugmug.albums.get", NickName=session.nickname)

    albums = []
    for alb in data.get("Albums", []):
        if "id" not in alb:
            raise EnumerationError(f"album without id: {alb.get('Title', '?')}")
        category = (alb.get("Category") or {}).get("Name", "")
        subcategory = (alb.get("SubCategory") or {}).get("Name") or None
        albums.append(RemoteAlbum(
            id=alb["id"],
            key=alb.get("Key", ""),
            title=alb.get("Title", ""),
            category=category,
            subcategory=subcategory,
            url=alb.get("URL", ""),
        ))

    log.info("Found %d albums", len(albums))
    return albums


def list_images(session: Session, album: RemoteAlbum) -> List[RemoteItem]:
    """
    List every image in an album. Missing FileName/MD5Sum come back as
    empty strings and are dealt with by the caller.
    """
    data = call(session, "smugmug.images.get", AlbumID=album.id, AlbumKey=album.key, Heavy=1)

    items = []
    for img in data.get("Album", {}).get("Images", []):
        try:
            size = int(img.get("Size", 0))
        except (TypeError, ValueError) as e:
            raise EnumerationError(f"image {img.get('id')} has invalid Size {img.get('Size')!r}") from e
        items.append(RemoteItem(
            id=img.get("id", 0),
            key=img.get("Key", ""),
            category=album.category,
            subcategory=album.subcategory,
            album=album.title,
            filename=img.get("FileName") or "",
            md5=img.get("MD5Sum") or "",
            size=size,
            url=img.get("OriginalURL", ""),
        ))
    return items
