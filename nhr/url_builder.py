"""
URL assembly for test requests

Joins host, API path and path parameters into a full https URL.
Query parameters are not handled here, see caller.with_params().
"""

from typing import Any


def build_url(host: str, path: str, *path_params: Any) -> str:
    """
    Build the request URL from host, path and path parameters

    Without path parameters the result is https://host/path. Path parameters
    are appended in order: https://host/path/334/456.

    No component is URL-escaped; callers pass already-safe values.

    Args:
        host: Host name, optionally with port (e.g., "api.example.com")
        path: Absolute API path starting with "/" (e.g., "/v1/users")
        *path_params: Path parameters, each converted with str()

    Returns:
        The assembled URL, or "" when path does not start with "/" or
        contains host (a full URL passed as path)
    """
    if not path.startswith("/") or host in path:
        return ""

    suffix = "".join(f"/{param}" for param in path_params)
    return f"https://{host}{path}{suffix}"
