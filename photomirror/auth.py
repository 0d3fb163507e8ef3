import logging
from typing import NamedTuple

import requests

from photomirror.config import API_URL
from photomirror.errors import AuthError

log = logging.getLogger(__name__)


class Session(NamedTuple):
    session_id: str
    nickname: str


class AuthManager:
    """
    Manages SmugMug authentication: logs in with email, password and
    API key and hands back the session used for every later call.
    """

    def __init__(self, api_key: str, email: str, password: str):
        self.api_key = api_key
        self.email = email
        self.password = password
        self.session = None

    def authenticate(self) -> Session:
        """
        Log in with password. Raises AuthError on any failure.
        """
        params = {
            "method": "smugmug.login.withPassword",
            "EmailAddress": self.email,
            "Password": self.password,
            "APIKey": self.api_key,
        }
        try:
            resp = requests.get(API_URL, params=params)
        except requests.RequestException as e:
            raise AuthError(f"Login error: {e}") from e

        if resp.status_code != 200:
            raise AuthError(f"Login error: status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthError(f"Login error: malformed reply: {e}") from e

        if data.get("stat") != "ok":
            raise AuthError(f"Login error: {data.get('message', 'unknown error')} (code {data.get('code')})")

        login = data.get("Login", {})
        session_id = login.get("Session", {}).get("id")
        nickname = login.get("User", {}).get("NickName")
        if not session_id or not nickname:
            raise AuthError("Login error: reply is missing the session id or nickname")

        self.session = Session(session_id, nickname)
        log.info("Logged in %s, NickName is %s", self.email, nickname)
        return self.session
