"""HTTP access for release metadata, archives and capability sources.

- HttpClient: what the rest of gls needs from HTTP (injectable for tests)
- RealHttpClient: urllib with system certificates and a hard timeout
- MockHttpClient: canned responses keyed by URL

There are no retries. A failed request is reported once and the caller
decides whether the run can continue.
"""

from __future__ import annotations

import json
import shutil
import ssl
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from gls import __version__
from gls.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """A failed request.

    ``status`` is 0 when no HTTP response was received. ``body`` holds the
    payload of an error response (GitHub explains rate limiting there).
    """

    url: str
    status: int
    message: str
    body: str = ""

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def head(self, url: str) -> Result[int, HttpError]:
        """Probe ``url`` without fetching the body; Ok carries the status code."""
        ...

    def get_text(self, url: str) -> Result[str, HttpError]: ...

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]: ...


class RealHttpClient:
    def __init__(self, timeout: float = 30.0, user_agent: str = f"gls-tools/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def _call[T](self, url: str, method: str, consume: Callable[[Any], T]) -> Result[T, HttpError]:
        req = urllib.request.Request(url, method=method, headers={"User-Agent": self.user_agent})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as response:
                return Ok(consume(response))
        except urllib.error.HTTPError as e:
            body = "" if method == "HEAD" else e.read().decode("utf-8", errors="replace")
            return Err(HttpError(url=url, status=e.code, message=str(e.reason), body=body))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message=f"Timed out after {self.timeout:g}s"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def head(self, url: str) -> Result[int, HttpError]:
        return self._call(url, "HEAD", lambda response: int(response.status))

    def get_text(self, url: str) -> Result[str, HttpError]:
        raw = self._call(url, "GET", lambda response: response.read())
        if isinstance(raw, Err):
            return raw
        try:
            return Ok(raw.value.decode("utf-8"))
        except UnicodeDecodeError as e:
            return Err(HttpError(url=url, status=0, message=f"Response is not UTF-8: {e}"))

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        def save(response: Any) -> Path:
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, "wb") as f:
                shutil.copyfileobj(response, f)
            return dest

        return self._call(url, "GET", save)


type _Canned[T] = T | HttpError


class MockHttpClient:
    """Canned responses for tests.

    Unknown URLs answer 404. Every call is appended to ``calls`` as
    ``(method, url)``.

    Usage:
        client = MockHttpClient()
        client.set_text("https://example.test/util.py", "REQUIRES = ()")
        assert client.get_text("https://example.test/util.py") == Ok("REQUIRES = ()")
    """

    def __init__(self) -> None:
        self._head: dict[str, _Canned[int]] = {}
        self._text: dict[str, _Canned[str]] = {}
        self._download: dict[str, _Canned[bytes]] = {}
        self.calls: list[tuple[str, str]] = []

    def set_head(self, url: str, response: int | HttpError = 200) -> None:
        self._head[url] = response

    def set_text(self, url: str, response: str | HttpError) -> None:
        self._text[url] = response

    def set_json(self, url: str, payload: dict[str, Any]) -> None:
        self._text[url] = json.dumps(payload)

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        self._download[url] = response

    def _respond[T](self, method: str, url: str, table: dict[str, _Canned[T]]) -> Result[T, HttpError]:
        self.calls.append((method, url))
        if url not in table:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = table[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def head(self, url: str) -> Result[int, HttpError]:
        return self._respond("head", url, self._head)

    def get_text(self, url: str) -> Result[str, HttpError]:
        return self._respond("get_text", url, self._text)

    def download(self, url: str, dest: Path) -> Result[Path, HttpError]:
        result = self._respond("download", url, self._download)
        if isinstance(result, Err):
            return result
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(result.value)
        return Ok(dest)
