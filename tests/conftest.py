"""
Shared test helpers: fake HTTP responses and remote items.
"""

import hashlib
import json

from photomirror.smugmug_api import RemoteItem


class FakeResponse:
    """Just enough of requests.Response for the code under test."""

    def __init__(self, status_code=200, body=b"", json_data=None, chunks=None, error=None):
        self.status_code = status_code
        self.body = body
        self.json_data = json_data
        self.chunks = chunks
        self.error = error

    def json(self):
        if self.json_data is None:
            return json.loads(self.body.decode("utf-8"))
        return self.json_data

    def iter_content(self, chunk_size=1):
        if self.chunks is not None:
            for chunk in self.chunks:
                yield chunk
        else:
            for i in range(0, len(self.body), chunk_size):
                yield self.body[i:i + chunk_size]
        if self.error is not None:
            raise self.error

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def md5_of(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def make_item(filename="oak.jpg", category="Nature", subcategory=None, album="Trees",
              md5="abc123", size=1000, url=None):
    return RemoteItem(
        id=1,
        key="k1",
        category=category,
        subcategory=subcategory,
        album=album,
        filename=filename,
        md5=md5,
        size=size,
        url=url or f"https://photos.example.com/{filename}",
    )
