"""
Pytest configuration and fixtures
"""

import threading
from http.server import ThreadingHTTPServer

import pytest

from nhr.config import Config
from tests.test_helpers import EchoHandler, create_mock_http_client


@pytest.fixture
def test_config():
    """Config with the built-in defaults only"""
    return Config({})


@pytest.fixture
def mock_http_client():
    """Mock HTTP client answering with an empty 200 response"""
    return create_mock_http_client()


@pytest.fixture
def sample_payload():
    """Sample JSON payload for request bodies and responses"""
    return {"name": "test-user", "age": 30, "tags": ["a", "b"], "active": True}


@pytest.fixture(scope="module")
def local_server():
    """Threaded HTTP server on 127.0.0.1; yields its base URL"""
    server = ThreadingHTTPServer(("127.0.0.1", 0), EchoHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
