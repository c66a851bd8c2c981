"""
Response decoding helpers

Both decoders read the streamed body exactly once and close the response,
whatever the outcome.

- response_to_struct() checks the status and raises on any failure.
- response_to_map() skips the status check and returns None on any failure.
"""

from typing import Any, TypeVar

import requests

from .config import Config, config
from .exceptions import ResponseDecodeError, ResponseReadError, ResponseStatusError
from .json_tools import json_unmarshal
from .logging_config import get_module_logger

logger = get_module_logger("response")

T = TypeVar("T")


def response_to_bytes(response: requests.Response, config_obj: Config | None = None) -> bytes:
    """
    Read the body of a successful response

    Args:
        response: Response returned by http_call()
        config_obj: Config object supplying the expected status (optional)

    Returns:
        The raw body bytes

    Raises:
        ResponseStatusError: status code is not the success code (200)
        ResponseReadError: body could not be read
    """
    if config_obj is None:
        config_obj = config
    ok_status = config_obj.get("response.ok_status", 200)

    try:
        if response.status_code != ok_status:
            raise ResponseStatusError(response.status_code, expected_status=ok_status)
        try:
            return response.content
        except requests.exceptions.RequestException as e:
            raise ResponseReadError(f"read from response body failed: {e}") from e
    finally:
        response.close()


def response_to_struct(
    response: requests.Response, target: T, config_obj: Config | None = None
) -> T:
    """
    Decode a JSON response into target in place

    Args:
        response: Response returned by http_call()
        target: dict, list or object to populate. JSON object keys are
                matched to attribute names exactly, then case-insensitively.
        config_obj: Config object supplying the expected status (optional)

    Returns:
        The populated target

    Raises:
        ResponseStatusError: status code is not 200
        ResponseReadError: body could not be read
        ResponseDecodeError: body is not valid JSON for the target
    """
    body = response_to_bytes(response, config_obj=config_obj)
    try:
        return json_unmarshal(body, target)
    except ResponseDecodeError as e:
        if e.raw_body is None:
            e.raw_body = body
        logger.debug(f"Cannot decode response from {response.url}: {e}")
        raise


def response_to_map(response: requests.Response) -> dict[str, Any] | None:
    """
    Decode a JSON object response into a dict

    The status code is not checked.

    Returns:
        The decoded mapping, or None if the body cannot be read, is not
        valid JSON, or is not a JSON object
    """
    try:
        decoded = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.debug(f"Response from {response.url} is not a JSON object: {e}")
        return None
    finally:
        response.close()

    if not isinstance(decoded, dict):
        logger.debug(
            f"Response from {response.url} is JSON {type(decoded).__name__}, not an object"
        )
        return None
    return decoded
