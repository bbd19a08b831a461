"""
Async HTTP transport for the FairOS-dfs REST API.

Every API group (user, pod, fs, kv, doc) goes through one Transport, which
owns the connection pool and the per-user session cookies.

API Reference: https://docs.fairos.fairdatasociety.org/docs/fairOS-dfs/api-reference

Debug logging:
    Enable with: FAIROS_DEBUG=1 or by setting log level to DEBUG
    Example: FAIROS_DEBUG=1 fairos ls --username alice mypod /
"""

import http.cookiejar
import json
import logging
import os

import httpx
from requests_toolbelt import MultipartEncoder

from fairos.errors import CouldNotConnectError, FairOSError

DEFAULT_URL = "http://localhost:9090/v1"
COOKIE_NAME = "fairOS-dfs"
COMPRESSION_HEADER = "fairOS-dfs-Compression"

# Keep-alive pool limits
IDLE_TIMEOUT = 6000
MAX_IDLE_PER_HOST = 20

logger = logging.getLogger(__name__)

if os.environ.get("FAIROS_DEBUG"):
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger.setLevel(logging.DEBUG)


class FairOSAPIError(FairOSError):
    """Raised when the FairOS server answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message, status_code)
        self.response = response


def _is_status_ok(status_code: int) -> bool:
    return 200 <= status_code < 300


def _parse_session_cookie(response: httpx.Response) -> str | None:
    """Return the fairOS-dfs cookie value from Set-Cookie, if any."""
    for header in response.headers.get_list("set-cookie"):
        pair = header.split(";", 1)[0]
        if "=" not in pair:
            continue
        name, value = pair.split("=", 1)
        if name.strip() == COOKIE_NAME:
            return value.strip()
    return None


class Transport:
    """Shared HTTP transport with a session cookie per username."""

    def __init__(
        self,
        url: str = None,
        timeout: float = 60.0,
        pool_idle_timeout: float = IDLE_TIMEOUT,
        max_idle_per_host: int = MAX_IDLE_PER_HOST,
        transport: httpx.AsyncBaseTransport = None,
    ):
        """
        Initialize the transport.

        Args:
            url: Server base URL including the API version (default http://localhost:9090/v1)
            timeout: Per-request timeout in seconds
            pool_idle_timeout: Seconds an idle keep-alive connection is kept
            max_idle_per_host: Maximum idle keep-alive connections
            transport: Optional httpx transport (tests inject httpx.MockTransport)
        """
        self.base_url = (url or DEFAULT_URL).rstrip("/")
        self.cookies: dict[str, str] = {}
        self.session = httpx.AsyncClient(
            # sessions live only in self.cookies; the client jar accepts nothing
            cookies=http.cookiejar.CookieJar(
                policy=http.cookiejar.DefaultCookiePolicy(allowed_domains=[])
            ),
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_keepalive_connections=max_idle_per_host,
                keepalive_expiry=pool_idle_timeout,
            ),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.session.aclose()

    # -- session cookies ---------------------------------------------------

    def cookie(self, username: str) -> str | None:
        return self.cookies.get(username)

    def set_cookie(self, username: str, cookie: str) -> None:
        self.cookies[username] = cookie

    def remove_cookie(self, username: str) -> None:
        self.cookies.pop(username, None)

    # -- raw requests ------------------------------------------------------

    async def _request(
        self, method: str, endpoint: str, cookie: str = None, **kwargs
    ) -> httpx.Response:
        """Make HTTP request to the FairOS API."""
        url = f"{self.base_url}{endpoint}"
        headers = dict(kwargs.pop("headers", None) or {})
        if cookie:
            headers["Cookie"] = f"{COOKIE_NAME}={cookie}"

        logger.debug(f"Request: {method} {url} params={kwargs.get('params')}")

        try:
            response = await self.session.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.debug(f"Transport failure: {e!r}")
            raise CouldNotConnectError(f"Could not connect to {self.base_url}: {e}") from e

        logger.debug(f"Response status: {response.status_code}")
        content_type = response.headers.get("content-type", "")
        if "json" in content_type or not _is_status_ok(response.status_code):
            body_preview = response.text[:2000] if response.text else "(empty)"
            logger.debug(f"Response body: {body_preview}")

        if not _is_status_ok(response.status_code):
            try:
                error_data = response.json()
                msg = error_data.get("message", response.text)
            except (ValueError, AttributeError):
                error_data = None
                msg = response.text
            raise FairOSAPIError(msg, response.status_code, error_data)

        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict:
        if not response.content:
            return {}
        try:
            return response.json()
        except json.JSONDecodeError as e:
            raise FairOSAPIError(
                f"Invalid JSON response: {e}", status_code=response.status_code
            ) from e

    async def get(self, endpoint: str, params: dict = None, cookie: str = None) -> dict:
        """GET with query parameters, returns the decoded JSON body."""
        response = await self._request("GET", endpoint, cookie=cookie, params=params or None)
        return self._json(response)

    async def post(
        self, endpoint: str, body: dict = None, cookie: str = None
    ) -> tuple[dict, str | None]:
        """
        POST a JSON body.

        Returns (decoded JSON body, fairOS-dfs cookie from Set-Cookie or None).
        """
        kwargs = {}
        if body is not None:
            kwargs["json"] = body
        response = await self._request("POST", endpoint, cookie=cookie, **kwargs)
        return self._json(response), _parse_session_cookie(response)

    async def delete(self, endpoint: str, body: dict = None, cookie: str = None) -> dict:
        """DELETE with a JSON body (FairOS reads delete arguments from the body)."""
        content = json.dumps(body or {}).encode()
        response = await self._request(
            "DELETE",
            endpoint,
            cookie=cookie,
            content=content,
            headers={"Content-Type": "application/json"},
        )
        return self._json(response)

    # -- multipart ---------------------------------------------------------

    @staticmethod
    def _encode_multipart(fields: list) -> tuple[bytes, str]:
        """Encode multipart form fields, returns (body, content type).

        Each field is (name, value) for text parts or
        (name, (filename, data_or_handle, content_type)) for file parts.
        """
        encoder = MultipartEncoder(fields=fields)
        logger.debug(f"multipart: content_length = {encoder.len}")
        return encoder.to_string(), encoder.content_type

    async def upload_multipart(
        self, endpoint: str, fields: list, cookie: str = None, compression: str = None
    ) -> dict:
        """POST a multipart form, returns the decoded JSON body."""
        body, content_type = self._encode_multipart(fields)
        headers = {"Content-Type": content_type}
        if compression:
            headers[COMPRESSION_HEADER] = compression
        response = await self._request(
            "POST", endpoint, cookie=cookie, content=body, headers=headers
        )
        return self._json(response)

    async def download_multipart(
        self, endpoint: str, fields: list, cookie: str = None
    ) -> bytes:
        """POST a multipart form, returns the raw response bytes."""
        body, content_type = self._encode_multipart(fields)
        response = await self._request(
            "POST",
            endpoint,
            cookie=cookie,
            content=body,
            headers={"Content-Type": content_type},
        )
        return response.content


class APIGroup:
    """
    Base for the per-area API classes (user, pod, fs, kv, doc).

    Subclasses call the helpers below with the error class of their area;
    server errors are re-raised as that class. `known` maps exact server
    messages to more specific error classes.
    """

    transport: Transport

    def _cookie(self, username: str) -> str | None:
        cookie = self.transport.cookie(username)
        if cookie is None:
            # the server decides whether the call needs a session
            logger.debug(f"No session cookie held for {username!r}")
        return cookie

    @staticmethod
    def _raise_as(e: FairOSAPIError, error: type, known: dict = None):
        cls = (known or {}).get(e.message, error)
        raise cls(e.message, e.status_code) from e

    async def _get(
        self, endpoint: str, params: dict = None, username: str = None,
        error: type = FairOSError, known: dict = None,
    ) -> dict:
        cookie = self._cookie(username) if username else None
        try:
            return await self.transport.get(endpoint, params, cookie)
        except FairOSAPIError as e:
            self._raise_as(e, error, known)

    async def _post(
        self, endpoint: str, body: dict = None, username: str = None,
        error: type = FairOSError, known: dict = None,
    ) -> tuple[dict, str | None]:
        cookie = self._cookie(username) if username else None
        try:
            return await self.transport.post(endpoint, body, cookie)
        except FairOSAPIError as e:
            self._raise_as(e, error, known)

    async def _delete(
        self, endpoint: str, body: dict = None, username: str = None,
        error: type = FairOSError,
    ) -> dict:
        try:
            return await self.transport.delete(endpoint, body, self._cookie(username))
        except FairOSAPIError as e:
            self._raise_as(e, error)

    async def _upload(
        self, endpoint: str, fields: list, username: str,
        error: type = FairOSError, compression: str = None,
    ) -> dict:
        try:
            return await self.transport.upload_multipart(
                endpoint, fields, self._cookie(username), compression
            )
        except FairOSAPIError as e:
            self._raise_as(e, error)

    async def _download(
        self, endpoint: str, fields: list, username: str, error: type = FairOSError,
    ) -> bytes:
        try:
            return await self.transport.download_multipart(
                endpoint, fields, self._cookie(username)
            )
        except FairOSAPIError as e:
            self._raise_as(e, error)
