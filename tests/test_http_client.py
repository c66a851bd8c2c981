"""
Tests for the HttpClient abstraction

These tests verify that the HttpClient wrapper correctly delegates to a
requests.Session, keeps the session cookie-free and builds redirect hops.
"""

from unittest.mock import Mock, patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from nhr.http_client import HttpClient, default_http_client


def mock_session():
    """Mock session whose responses are never redirects"""
    session = Mock()
    session.send.return_value.is_redirect = False
    return session


def redirect_response(status_code, location):
    response = requests.Response()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict({"Location": location})
    return response


def prepared(
    method="POST", url="https://api.example.com/v1/start", headers=None, body=b'{"k":"v"}'
):
    return requests.Request(method, url, headers=headers or {}, data=body).prepare()


class TestHttpClient:
    """Test HttpClient wrapper functionality"""

    @patch("nhr.http_client.requests.Session")
    def test_creates_session_by_default(self, mock_session_cls):
        """Should create its own requests.Session when none is given"""
        client = HttpClient()

        mock_session_cls.assert_called_once_with()
        assert client.session is mock_session_cls.return_value

    def test_send_streams_by_default(self):
        """Should send with stream=True, the given timeout and requests' redirects off"""
        session = mock_session()
        request = requests.Request("GET", "https://example.com/").prepare()

        client = HttpClient(session=session)
        response = client.send(request, timeout=3)

        session.send.assert_called_once_with(
            request, timeout=3, allow_redirects=False, stream=True
        )
        assert response == session.send.return_value

    def test_send_with_additional_kwargs(self):
        """Should pass additional kwargs to Session.send()"""
        session = mock_session()
        request = requests.Request("GET", "https://example.com/").prepare()

        client = HttpClient(session=session)
        client.send(request, verify=False, stream=False)

        call_kwargs = session.send.call_args[1]
        assert not call_kwargs["verify"]
        assert not call_kwargs["allow_redirects"]
        assert call_kwargs["stream"] is False
        assert call_kwargs["timeout"] is None

    def test_close_closes_session(self):
        """Should release the session's connections"""
        session = mock_session()

        HttpClient(session=session).close()

        session.close.assert_called_once()

    def test_default_client_is_shared(self):
        """The module-level default client should hold a real session"""
        assert isinstance(default_http_client, HttpClient)
        assert isinstance(default_http_client.session, requests.Session)

    def test_session_refuses_cookies(self):
        """The session cookie policy should reject every Set-Cookie"""
        client = HttpClient()

        policy = client.session.cookies.get_policy()

        assert policy.is_not_allowed("api.example.com")
        assert policy.is_not_allowed("127.0.0.1")


class TestBuildRedirect:
    """Test the request built for a redirect hop"""

    @pytest.mark.parametrize("status_code", [301, 302, 303])
    def test_post_becomes_get_without_body(self, status_code):
        """Should switch to GET and drop the body and its headers"""
        request = prepared(headers={"Content-Type": "application/json", "X-Trace": "1"})

        redirected = HttpClient().build_redirect(request, redirect_response(status_code, "/next"))

        assert redirected.method == "GET"
        assert redirected.body is None
        assert redirected.url == "https://api.example.com/next"
        assert "Content-Type" not in redirected.headers
        assert "Content-Length" not in redirected.headers
        assert redirected.headers["X-Trace"] == "1"

    @pytest.mark.parametrize("status_code", [307, 308])
    def test_method_and_body_kept(self, status_code):
        """Should keep method, body and content headers"""
        request = prepared(headers={"Content-Type": "application/json"})

        redirected = HttpClient().build_redirect(request, redirect_response(status_code, "/next"))

        assert redirected.method == "POST"
        assert redirected.body == b'{"k":"v"}'
        assert redirected.headers["Content-Type"] == "application/json"

    def test_head_kept_on_302(self):
        """Should not turn HEAD into GET"""
        request = prepared(method="HEAD", body=None)

        redirected = HttpClient().build_redirect(request, redirect_response(302, "/next"))

        assert redirected.method == "HEAD"

    def test_cookie_kept_on_same_host_and_subdomain(self):
        """Should copy Cookie and Authorization to the same host or a subdomain"""
        headers = {"Cookie": "a=1; b=2", "Authorization": "Bearer t"}
        client = HttpClient()

        for location in ["/other", "https://eu.api.example.com/x"]:
            redirected = client.build_redirect(
                prepared(headers=headers), redirect_response(302, location)
            )

            assert redirected.headers["Cookie"] == "a=1; b=2"
            assert redirected.headers["Authorization"] == "Bearer t"

    def test_sensitive_headers_dropped_on_other_host(self):
        """Should drop Cookie and Authorization when leaving the original host"""
        request = prepared(headers={"Cookie": "a=1", "Authorization": "Bearer t", "X-Trace": "1"})

        redirected = HttpClient().build_redirect(
            request, redirect_response(302, "https://evil.example.org/x")
        )

        assert "Cookie" not in redirected.headers
        assert "Authorization" not in redirected.headers
        assert redirected.headers["X-Trace"] == "1"

    def test_original_request_untouched(self):
        """Should leave the previous hop's request unchanged"""
        request = prepared(headers={"Content-Type": "application/json"})

        HttpClient().build_redirect(request, redirect_response(303, "/next"))

        assert request.method == "POST"
        assert request.body == b'{"k":"v"}'
