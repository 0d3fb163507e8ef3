class PhotoMirrorError(Exception):
    """
    Base class for every fatal error raised while mirroring.
    """


class ConfigError(PhotoMirrorError):
    pass


class ScanError(PhotoMirrorError):
    """
    The local tree could not be read. Raised before any remote work so an
    unreadable file is never mistaken for an orphan.
    """


class AuthError(PhotoMirrorError):
    pass


class EnumerationError(PhotoMirrorError):
    pass


class UnmappableItemError(PhotoMirrorError):
    """
    A remote item has no filename and so no local path.
    """


class TransferError(PhotoMirrorError):
    pass


class HTTPStatusError(TransferError):
    def __init__(self, url: str, status_code: int):
        super().__init__(f"unexpected status code downloading {url}: {status_code}")
        self.url = url
        self.status_code = status_code


class SizeMismatchError(TransferError):
    def __init__(self, url: str, expected: int, actual: int):
        super().__init__(f"downloaded {actual} bytes from {url}, expected {expected}")
        self.url = url
        self.expected = expected
        self.actual = actual


class CleanupError(PhotoMirrorError):
    pass
