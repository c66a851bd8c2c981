"""HTTP client abstraction for dependency injection and testability."""

from http.cookiejar import DefaultCookiePolicy
from urllib.parse import urljoin, urlsplit

import requests

from .logging_config import get_module_logger

logger = get_module_logger("http_client")

MAX_REDIRECTS = 10

# Dropped when a redirect leaves the original host and its subdomains
SENSITIVE_HEADERS = ("Authorization", "WWW-Authenticate", "Cookie", "Cookie2")

# Dropped together with the body when a redirect turns the request into a GET
BODY_HEADERS = ("Content-Length", "Content-Type", "Transfer-Encoding")


def _same_site(initial_url: str, url: str) -> bool:
    initial_host = (urlsplit(initial_url).hostname or "").lower()
    host = (urlsplit(url).hostname or "").lower()
    return host == initial_host or host.endswith("." + initial_host)


class HttpClient:
    """
    HTTP client wrapper sending prepared requests.

    This abstraction enables:
    - Dependency injection for testing
    - Easy mocking in unit tests
    - One shared requests.Session so connections are reused across calls

    The session never stores cookies, and redirects are followed here rather
    than by requests, so every call carries exactly the headers and cookies
    it was built with.
    """

    def __init__(self, session: requests.Session | None = None, max_redirects: int = MAX_REDIRECTS):
        self.session = session or requests.Session()
        self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self.max_redirects = max_redirects

    def send(
        self,
        request: requests.PreparedRequest,
        timeout: float | None = None,
        allow_redirects: bool = True,
        **kwargs,
    ) -> requests.Response:
        """
        Send a prepared request, following redirects.

        The body is streamed, so the returned response must be consumed once
        and closed by the caller.

        Args:
            request: Prepared request to send
            timeout: Optional request timeout in seconds, applied to each hop
            allow_redirects: Whether to follow redirects (default: True)
            **kwargs: Additional arguments to pass to requests.Session.send()

        Returns:
            requests.Response object; followed redirects are in its history

        Raises:
            requests.exceptions.TooManyRedirects: more than max_redirects hops
        """
        kwargs.setdefault("stream", True)
        response = self.session.send(request, timeout=timeout, allow_redirects=False, **kwargs)

        initial_url = request.url
        history = []
        while allow_redirects and response.is_redirect:
            if len(history) >= self.max_redirects:
                response.close()
                raise requests.exceptions.TooManyRedirects(
                    f"stopped after {self.max_redirects} redirects", response=response
                )

            request = self.build_redirect(request, response, initial_url)
            response.close()
            history.append(response)
            logger.debug(f"HTTP {response.status_code} redirect -> {request.method} {request.url}")

            response = self.session.send(request, timeout=timeout, allow_redirects=False, **kwargs)

        if history:
            response.history = history
        return response

    def build_redirect(
        self,
        request: requests.PreparedRequest,
        response: requests.Response,
        initial_url: str | None = None,
    ) -> requests.PreparedRequest:
        """
        Build the request for the next redirect hop.

        - 301/302/303 turn any method but GET and HEAD into GET and drop the body
        - 307/308 keep method and body
        - headers are copied, cookies included; credentials and cookies are
          dropped when the target is neither the initial host nor a subdomain of it
        """
        location = self.session.get_redirect_target(response)
        redirected = request.copy()
        redirected.prepare_url(urljoin(request.url, location), None)

        if response.status_code not in (
            requests.codes.temporary_redirect,
            requests.codes.permanent_redirect,
        ):
            if redirected.method not in ("GET", "HEAD"):
                redirected.method = "GET"
            redirected.body = None
            for header in BODY_HEADERS:
                redirected.headers.pop(header, None)

        if not _same_site(initial_url or request.url, redirected.url):
            for header in SENSITIVE_HEADERS:
                redirected.headers.pop(header, None)

        return redirected

    def close(self):
        """Release pooled connections."""
        self.session.close()


# Shared default client used by http_call()
default_http_client = HttpClient()
