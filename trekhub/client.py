"""
HTTP client for the TrekHub API.

``TrekClient`` is the single caller used by front ends. It reads the token
from a ``TokenStore`` when each request is sent (never when the client is
built), and on a 401 it clears the stored token and calls ``on_unauthorized``,
the hook a UI uses to go back to its login screen. Every failure is also
passed to ``notify`` before ``ApiError`` is raised.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import httpx

from trekhub.config.settings import get_settings
from trekhub.models.trek import TrekDifficulty
from trekhub.schemas.trek import TrekPage, TrekRead
from trekhub.schemas.user import UserRead

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(
        self,
        status_code: int,
        msg: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(msg)
        self.status_code = status_code
        self.msg = msg
        self.error_code = error_code
        self.details = details or {}

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def field_names(self) -> List[str]:
        return [entry.get("field") for entry in self.details.get("fields", [])]


class TokenStore:
    """
    Holds the current session token, optionally persisted to ``path`` so a
    later process picks it up.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, token: Optional[str] = None):
        self.path = Path(path) if path else None
        self._token = token
        if self._token is None and self.path and self.path.exists():
            self._token = self._read_file()

    def _read_file(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError):
            logger.warning(f"Ignoring unreadable token file {self.path}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        if self.path:
            self.path.write_text(json.dumps({"token": token}))

    def clear(self) -> None:
        self._token = None
        if self.path and self.path.exists():
            self.path.unlink()


class HeaderTokenAuth(httpx.Auth):
    """
    Attaches the stored token to each outgoing request and handles 401
    responses by clearing it.
    """

    def __init__(
        self,
        store: TokenStore,
        header_name: str,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.header_name = header_name
        self.on_unauthorized = on_unauthorized

    def auth_flow(self, request: httpx.Request):
        token = self.store.get()
        if token:
            request.headers[self.header_name] = token
        response = yield request

        if response.status_code == 401:
            logger.info("Session rejected by server; clearing stored token")
            self.store.clear()
            if self.on_unauthorized:
                self.on_unauthorized()


class TrekClient:
    """Async client for the TrekHub API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        store: Optional[TokenStore] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
        notify: Optional[Callable[[ApiError], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.store = store or TokenStore(settings.client.token_file)
        self.notify = notify
        self._auth = HeaderTokenAuth(self.store, settings.security.token_header, on_unauthorized)
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.client.base_url,
            timeout=timeout or settings.client.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "TrekClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.store.get() is not None

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._http.request(method, url, auth=self._auth, **kwargs)
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        error = ApiError(
            status_code=response.status_code,
            msg=body.get("msg") or response.reason_phrase or "Request failed",
            error_code=body.get("error_code"),
            details=body.get("details"),
        )
        if self.notify:
            self.notify(error)
        raise error

    # Auth

    async def signup(self, name: str, email: str, password: str) -> str:
        data = await self._request("POST", "/auth/signup", json={"name": name, "email": email, "password": password})
        self.store.set(data["token"])
        return data["token"]

    async def login(self, email: str, password: str) -> str:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.store.set(data["token"])
        return data["token"]

    def logout(self) -> None:
        self.store.clear()

    async def me(self) -> UserRead:
        return UserRead.model_validate(await self._request("GET", "/auth/me"))

    # Treks

    async def list_treks(self, page: int = 1, limit: Optional[int] = None) -> TrekPage:
        params = {"page": page}
        if limit is not None:
            params["limit"] = limit
        return TrekPage.model_validate(await self._request("GET", "/treks", params=params))

    async def get_trek(self, trek_id: int) -> TrekRead:
        return TrekRead.model_validate(await self._request("GET", f"/treks/{trek_id}"))

    async def create_trek(
        self,
        name: str,
        location: str,
        difficulty: Union[TrekDifficulty, str],
        price: float,
        images: Optional[List[str]] = None,
    ) -> TrekRead:
        payload = {
            "name": name,
            "location": location,
            "difficulty": difficulty.value if isinstance(difficulty, TrekDifficulty) else difficulty,
            "price": price,
            "images": images or [],
        }
        return TrekRead.model_validate(await self._request("POST", "/treks", json=payload))

    async def update_trek(self, trek_id: int, **fields: Any) -> TrekRead:
        if isinstance(fields.get("difficulty"), TrekDifficulty):
            fields["difficulty"] = fields["difficulty"].value
        return TrekRead.model_validate(await self._request("PUT", f"/treks/{trek_id}", json=fields))

    async def delete_trek(self, trek_id: int) -> str:
        data = await self._request("DELETE", f"/treks/{trek_id}")
        return data["msg"]


def page_count(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` items ``limit`` at a time."""
    if limit < 1:
        return 0
    return math.ceil(total / limit)


def filter_treks(
    treks: Iterable[TrekRead],
    location: Optional[str] = None,
    difficulty: Optional[Union[TrekDifficulty, str]] = None,
) -> List[TrekRead]:
    """
    Narrow an already fetched page by location substring and exact difficulty.

    A difficulty outside the scale matches nothing.
    """
    needle = location.lower() if location else None
    wanted = None
    if difficulty:
        try:
            wanted = TrekDifficulty(difficulty)
        except ValueError:
            return []
    return [
        trek for trek in treks
        if (needle is None or needle in trek.location.lower())
        and (wanted is None or trek.difficulty == wanted)
    ]


def parse_image_list(text: str) -> List[str]:
    """Split comma-separated image URLs as typed into a form field."""
    return [part.strip() for part in text.split(",") if part.strip()]
