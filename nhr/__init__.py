"""nhr: build, send and decode HTTP test requests."""

from .caller import (
    HttpRequest,
    Option,
    create_request,
    http_call,
    with_cookies,
    with_headers,
    with_params,
    with_post_json_body,
    with_post_string_body,
    with_timeout,
)
from .exceptions import (
    ConfigurationError,
    ConstructionError,
    NhrError,
    ResponseDecodeError,
    ResponseError,
    ResponseReadError,
    ResponseStatusError,
    TransportError,
)
from .http_client import HttpClient, default_http_client
from .json_tools import json_marshal, json_unmarshal
from .response import response_to_bytes, response_to_map, response_to_struct
from .url_builder import build_url

__all__ = [
    "ConfigurationError",
    "ConstructionError",
    "HttpClient",
    "HttpRequest",
    "NhrError",
    "Option",
    "ResponseDecodeError",
    "ResponseError",
    "ResponseReadError",
    "ResponseStatusError",
    "TransportError",
    "build_url",
    "create_request",
    "default_http_client",
    "http_call",
    "json_marshal",
    "json_unmarshal",
    "response_to_bytes",
    "response_to_map",
    "response_to_struct",
    "with_cookies",
    "with_headers",
    "with_params",
    "with_post_json_body",
    "with_post_string_body",
    "with_timeout",
]
