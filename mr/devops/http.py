"""HTTP client abstraction for the release-management REST API.

This module provides:
- HttpClient: Protocol for JSON GET requests (injectable for tests)
- RealHttpClient: Real implementation using urllib with basic credentials
- MockHttpClient: Canned responses keyed by URL, for tests
"""

from __future__ import annotations

import base64
import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from mr import __version__
from mr.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "Params",
    "RealHttpClient",
    "build_url",
]

logger = logging.getLogger(__name__)

Params = Mapping[str, str | int]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


def _no_headers() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Decoded JSON body plus response headers (names lower-cased)."""

    url: str
    body: object
    headers: Mapping[str, str] = field(default_factory=_no_headers)

    def header(self, name: str) -> str | None:
        value = self.headers.get(name.lower())
        if value is None or not value.strip():
            return None
        return value.strip()


def build_url(url: str, params: Params | None = None) -> str:
    """Append query parameters to `url`, keeping their order."""
    if not params:
        return url
    query = urllib.parse.urlencode({k: str(v) for k, v in params.items()}, safe="$")
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP operations."""

    def get_json(self, url: str, params: Params | None = None) -> Result[HttpResponse, HttpError]:
        """GET `url` with query `params` and decode the JSON body.

        Returns:
            Ok with HttpResponse, or Err with HttpError
        """
        ...


class RealHttpClient:
    """HTTP client using urllib.

    Sends the personal access token as basic credentials with an empty user
    name, which is what the release-management service expects.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        timeout: float = 30.0,
        user_agent: str = f"mr-release/{__version__}",
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._authorization: str | None = None
        if token:
            encoded = base64.b64encode(f":{token}".encode("utf-8")).decode("ascii")
            self._authorization = f"Basic {encoded}"
        self._ssl_context = ssl.create_default_context()

    def _headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        if self._authorization:
            headers["Authorization"] = self._authorization
        return headers

    def _request(self, url: str) -> Result[tuple[bytes, dict[str, str]], HttpError]:
        logger.debug("GET %s", url)
        try:
            req = urllib.request.Request(url, headers=self._headers())
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                status = getattr(response, "status", 200)
                headers = {k.lower(): v for k, v in response.headers.items()}
                # 203 means the token was rejected and a sign-in page was served.
                if status == 203:
                    return Err(
                        HttpError(
                            url=url,
                            status=status,
                            message="Not authorized, check the personal access token",
                        )
                    )
                body = response.read()
                logger.debug("GET %s -> %s (%d bytes)", url, status, len(body))
                return Ok((body, headers))
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str, params: Params | None = None) -> Result[HttpResponse, HttpError]:
        full_url = build_url(url, params)
        result = self._request(full_url)
        if isinstance(result, Err):
            logger.debug("GET %s failed: %s", full_url, result.error)
            return result

        raw, headers = result.value
        try:
            body: object = json.loads(raw.decode("utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=full_url, status=0, message=f"JSON parse error: {e}"))
        return Ok(HttpResponse(url=full_url, body=body, headers=headers))


class MockHttpClient:
    """Mock HTTP client for testing.

    Responses are keyed by the full URL including query parameters.

    Usage:
        client = MockHttpClient()
        client.set_json("https://example.com/api", {"value": []}, params={"top": 100})
        result = client.get_json("https://example.com/api", {"top": 100})
    """

    def __init__(self) -> None:
        self._responses: dict[str, HttpResponse | HttpError] = {}
        self.calls: list[str] = []

    def set_json(
        self,
        url: str,
        body: object,
        *,
        params: Params | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        full_url = build_url(url, params)
        lowered = {k.lower(): v for k, v in (headers or {}).items()}
        self._responses[full_url] = HttpResponse(url=full_url, body=body, headers=lowered)

    def set_error(self, url: str, error: HttpError, *, params: Params | None = None) -> None:
        self._responses[build_url(url, params)] = error

    def get_json(self, url: str, params: Params | None = None) -> Result[HttpResponse, HttpError]:
        full_url = build_url(url, params)
        self.calls.append(full_url)

        response = self._responses.get(full_url)
        if response is None:
            return Err(HttpError(url=full_url, status=404, message="Not found (mock)"))
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)
