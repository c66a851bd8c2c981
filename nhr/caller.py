"""
Request builder and executor

Builds one HTTP request from a method, a URL and a list of options, sends it
through the shared client and hands back the raw response:

    response = http_call(
        "post",
        build_url("api.example.com", "/v1/users"),
        with_params({"page": "1"}),
        with_post_json_body({"name": "test"}),
    )

Options are plain callables mutating an HttpRequest. They are applied in the
order given, and an option replaces the whole field it touches.
"""

from collections.abc import Callable, Iterable, Mapping
from datetime import timedelta
from http.cookiejar import Cookie
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests

from .config import Config, config
from .exceptions import ConstructionError, TransportError
from .http_client import HttpClient, default_http_client
from .json_tools import json_marshal
from .logging_config import get_module_logger

logger = get_module_logger("caller")

CookieLike = Cookie | tuple[str, str]


class HttpRequest:
    """Descriptor of one about-to-be-sent request"""

    def __init__(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        cookies: list[CookieLike] | None = None,
        timeout: float = 3,
        params: str = "",
        post_body: str = "",
    ):
        self.method = method.upper()
        self.url = url
        self.headers = headers if headers is not None else {}
        self.cookies = cookies if cookies is not None else []
        self.timeout = timeout
        self.params = params
        self.post_body = post_body

    def __repr__(self) -> str:
        return f"HttpRequest(method={self.method!r}, url={self.url!r}, params={self.params!r})"


Option = Callable[[HttpRequest], None]


def with_headers(headers: Mapping[str, str]) -> Option:
    """Replace the request headers"""

    def apply(request: HttpRequest) -> None:
        request.headers = dict(headers)

    return apply


def with_timeout(timeout: float | timedelta) -> Option:
    """Set the request timeout, in seconds or as a timedelta"""

    def apply(request: HttpRequest) -> None:
        request.timeout = timeout.total_seconds() if isinstance(timeout, timedelta) else timeout

    return apply


def with_cookies(cookies: Iterable[CookieLike]) -> Option:
    """Replace the cookies sent with the request, in attach order"""

    def apply(request: HttpRequest) -> None:
        request.cookies = list(cookies)

    return apply


def with_params(params: Mapping[str, Any]) -> Option:
    """
    Set the query parameters

    Pairs are URL-encoded with standard query rules (space becomes "+") and
    sorted by key, so the same mapping always gives the same query string.
    """

    def apply(request: HttpRequest) -> None:
        request.params = urlencode(sorted((str(k), str(v)) for k, v in params.items()))

    return apply


def with_post_json_body(data: Mapping[str, Any]) -> Option:
    """
    Set a JSON object body

    Meant for headers with Content-Type: application/json (the default).

    Raises:
        ConstructionError: when applied, if data cannot be serialized
    """

    def apply(request: HttpRequest) -> None:
        try:
            request.post_body = json_marshal(dict(data)).decode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize JSON body for {request.url}: {e}")
            raise ConstructionError(
                f"convert post body to JSON failed: {e}", url=request.url
            ) from e

    return apply


def with_post_string_body(data: str) -> Option:
    """
    Set a raw string body, sent verbatim

    Meant for Content-Type: application/x-www-form-urlencoded bodies
    (key1=val1&key2=val2) or anything already serialized.
    """

    def apply(request: HttpRequest) -> None:
        request.post_body = data

    return apply


def _cookie_pair(cookie: CookieLike) -> str:
    if isinstance(cookie, Cookie):
        return f"{cookie.name}={cookie.value}"
    name, value = cookie
    return f"{name}={value}"


def _final_url(request: HttpRequest) -> str:
    try:
        parts = urlsplit(request.url)
    except ValueError as e:
        logger.error(f"Cannot parse request URL {request.url!r}: {e}")
        raise ConstructionError(f"parse request url failed: {e}", url=request.url) from e

    if not parts.scheme or not parts.netloc:
        logger.error(f"Request URL is not absolute: {request.url!r}")
        raise ConstructionError(
            f"parse request url failed: {request.url!r} is not an absolute URL", url=request.url
        )

    # The query is always replaced, even by an empty params string
    return urlunsplit((parts.scheme, parts.netloc, parts.path, request.params, parts.fragment))


def create_request(
    request: HttpRequest, http_client: HttpClient | None = None
) -> requests.Response:
    """
    Build and send the request described by an HttpRequest

    Args:
        request: Request descriptor with all options applied
        http_client: HTTP client for sending (uses the shared default if None)

    Returns:
        The streamed requests.Response, to be decoded once by the caller

    Raises:
        ConstructionError: URL is malformed or the request cannot be prepared
        TransportError: sending the request failed
    """
    if http_client is None:
        http_client = default_http_client

    url = _final_url(request)
    body = request.post_body.encode("utf-8") if request.post_body else None

    try:
        prepared = requests.Request(
            method=request.method, url=url, headers=request.headers, data=body
        ).prepare()
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.error(f"Cannot create request {request.method} {url}: {e}")
        raise ConstructionError(f"create request instance failed: {e}", url=url) from e

    if request.cookies:
        cookie_line = "; ".join(_cookie_pair(cookie) for cookie in request.cookies)
        existing = prepared.headers.get("Cookie")
        prepared.headers["Cookie"] = f"{existing}; {cookie_line}" if existing else cookie_line

    logger.debug(f"{request.method} {url} (timeout={request.timeout}s)")

    try:
        response = http_client.send(prepared, timeout=request.timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Send request error for {request.method} {url}: {e}")
        raise TransportError(f"send request error: {e}", url=url) from e

    logger.debug(f"{request.method} {url} -> HTTP {response.status_code}")
    return response


def http_call(
    method: str,
    url: str,
    *options: Option,
    http_client: HttpClient | None = None,
    config_obj: Config | None = None,
) -> requests.Response:
    """
    Issue one HTTP request

    Args:
        method: HTTP method (GET, POST, PUT, DELETE, ...), any case
        url: Request URL, usually from build_url()
        *options: Options applied in order to the request descriptor
        http_client: HTTP client for sending (optional)
        config_obj: Config object supplying default timeout and headers (optional)

    Returns:
        The streamed requests.Response

    Raises:
        ConstructionError: URL is malformed, JSON body cannot be serialized,
                           or the request cannot be prepared
        TransportError: sending the request failed
    """
    if config_obj is None:
        config_obj = config

    request = HttpRequest(
        method=method,
        url=url,
        headers=dict(config_obj.get("request.headers", {"Content-Type": "application/json"})),
        timeout=config_obj.get("request.timeout", 3),
    )

    for option in options:
        option(request)

    return create_request(request, http_client=http_client)
