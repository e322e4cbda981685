"""HTTP transport used to reach the font catalog and binary hosts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from threading import Lock
from typing import Protocol, runtime_checkable

import requests


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "fontlock"


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """Outcome of a single GET request.

    ``status`` is ``0`` and ``error`` is set when the request never produced a
    response (DNS failure, refused connection, TLS error, timeout, ...).
    """

    status: int
    content: bytes = b""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@runtime_checkable
class Transport(Protocol):
    """Blocking GET capability injected into the catalog client."""

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> FetchResponse: ...


def _tls_help(url: str) -> str:
    return (
        "TLS certificate verification failed while downloading "
        f"'{url}'. On macOS run the Python 'Install Certificates.command' "
        "(from the python.org installer). On Windows run 'py -m pip install --upgrade certifi'. "
        "On Linux install your 'ca-certificates' package (apt/yum/apk). "
        "Also check system date/time and any proxy or corporate SSL inspection."
    )


class RequestsTransport:
    """Transport backed by a lazily created :class:`requests.Session`."""

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        user_agent: str | None = None,
    ) -> None:
        self._session_lock = Lock()
        self._session = session
        self._timeout = timeout
        self._user_agent = user_agent or DEFAULT_USER_AGENT

    def fetch(self, url: str, headers: Mapping[str, str] | None = None) -> FetchResponse:
        merged = {"User-Agent": self._user_agent, **dict(headers or {})}
        client = self._ensure_session()
        logger.debug("GET %s", url)
        try:
            response = client.get(url, headers=merged, timeout=self._timeout)
        except requests.exceptions.SSLError as exc:
            return FetchResponse(status=0, error=f"{_tls_help(url)} ({exc})")
        except requests.RequestException as exc:
            return FetchResponse(status=0, error=str(exc) or type(exc).__name__)
        logger.debug("GET %s -> HTTP %s (%d bytes)", url, response.status_code, len(response.content))
        return FetchResponse(status=response.status_code, content=response.content)

    def close(self) -> None:
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None

    def _ensure_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session


__all__ = ["DEFAULT_USER_AGENT", "FetchResponse", "RequestsTransport", "Transport"]
