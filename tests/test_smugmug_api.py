import pytest
import requests

from conftest import FakeResponse
from photomirror import smugmug_api as api
from photomirror.auth import Session
from photomirror.errors import EnumerationError

SESSION = Session("sid-1", "shutterbug")

ALBUMS_REPLY = {
    "stat": "ok",
    "Albums": [
        {
            "id": 11, "Key": "kA", "Title": "Trees", "URL": "https://x/trees",
            "Category": {"id": 1, "Name": "Nature"},
        },
        {
            "id": 12, "Key": "kB", "Title": "Summer", "URL": "https://x/summer",
            "Category": {"id": 2, "Name": "Family"},
            "SubCategory": {"id": 3, "Name": "2020"},
        },
    ],
}

IMAGES_REPLY = {
    "stat": "ok",
    "Album": {
        "id": 11,
        "Key": "kA",
        "Images": [
            {
                "id": 101, "Key": "i1", "FileName": "oak.jpg", "MD5Sum": "abc123",
                "Size": 1000, "OriginalURL": "https://x/oak.jpg",
            },
            {"id": 102, "Key": "i2", "Size": "5", "OriginalURL": "https://x/noname"},
        ],
    },
}


def patch_get(monkeypatch, response=None, error=None):
    calls = []

    def fake_get(url, params=None, **kwargs):
        calls.append(params)
        if error is not None:
            raise error
        return response

    monkeypatch.setattr("photomirror.smugmug_api.requests.get", fake_get)
    return calls


def test_list_albums(monkeypatch):
    calls = patch_get(monkeypatch, FakeResponse(json_data=ALBUMS_REPLY))

    albums = api.list_albums(SESSION)

    assert calls[0]["method"] == "smugmug.albums.get"
    assert calls[0]["SessionID"] == "sid-1"
    assert calls[0]["NickName"] == "shutterbug"
    assert albums == [
        api.RemoteAlbum(11, "kA", "Trees", "Nature", None, "https://x/trees"),
        api.RemoteAlbum(12, "kB", "Summer", "Family", "2020", "https://x/summer"),
    ]


def test_list_images_carries_album_position(monkeypatch):
    calls = patch_get(monkeypatch, FakeResponse(json_data=IMAGES_REPLY))
    album = api.RemoteAlbum(11, "kA", "Trees", "Nature", None, "https://x/trees")

    oak, noname = api.list_images(SESSION, album)

    assert calls[0]["AlbumID"] == 11
    assert calls[0]["AlbumKey"] == "kA"
    assert oak == api.RemoteItem(101, "i1", "Nature", None, "Trees", "oak.jpg",
                                 "abc123", 1000, "https://x/oak.jpg")
    assert noname.filename == ""
    assert noname.md5 == ""
    assert noname.size == 5


def test_api_failure_reply(monkeypatch):
    reply = {"stat": "fail", "code": 15, "message": "empty set"}
    patch_get(monkeypatch, FakeResponse(json_data=reply))
    with pytest.raises(EnumerationError, match="empty set"):
        api.list_albums(SESSION)


def test_bad_status(monkeypatch):
    patch_get(monkeypatch, FakeResponse(status_code=503))
    with pytest.raises(EnumerationError):
        api.list_albums(SESSION)


def test_malformed_json(monkeypatch):
    patch_get(monkeypatch, FakeResponse(body=b"<html>"))
    with pytest.raises(EnumerationError):
        api.list_albums(SESSION)


def test_transport_error(monkeypatch):
    patch_get(monkeypatch, error=requests.Timeout("slow"))
    with pytest.raises(EnumerationError):
        api.call(SESSION, "smugmug.albums.get")


@pytest.mark.parametrize("size", [None, "big", [1]])
def test_invalid_size_is_enumeration_error(monkeypatch, size):
    reply = {"stat": "ok", "Album": {"Images": [{"id": 7, "FileName": "a.jpg", "Size": size}]}}
    patch_get(monkeypatch, FakeResponse(json_data=reply))
    album = api.RemoteAlbum(11, "kA", "Trees", "Nature", None, "https://x/trees")

    with pytest.raises(EnumerationError, match="invalid Size"):
        api.list_images(SESSION, album)
