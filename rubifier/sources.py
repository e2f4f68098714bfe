"""
Fetching dictionary payloads from files and URLs.

A payload is a JSON object with "characters" and "words" lists; see
rubifier.dictionary for the item layout.
"""

import json
import logging
import urllib.request
from collections.abc import Mapping
from pathlib import Path

from .dictionary import MalformedInputError

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30  # seconds


def _is_url(location: str) -> bool:
    return location.startswith(('http://', 'https://'))


def _read_url(url: str) -> bytes:
    logger.info(f'Downloading dictionary: {url}')
    with urllib.request.urlopen(url, timeout=FETCH_TIMEOUT) as response:
        return response.read()


def _read_file(path: Path) -> bytes:
    if not path.exists():
        raise FileNotFoundError(f'Dictionary file not found: {path}')
    logger.info(f'Reading dictionary: {path}')
    return path.read_bytes()


def parse_payload(raw: bytes | str, origin: str = '<payload>') -> dict:
    """Decode a JSON dictionary payload."""
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f'Invalid dictionary JSON in {origin}: {e}') from e
    if not isinstance(payload, dict):
        raise MalformedInputError(
            f'Dictionary in {origin} must be a JSON object, got {type(payload).__name__}'
        )
    return payload


def fetch_dictionary_payload(option) -> Mapping:
    """
    Resolve a dictionary option into a payload mapping.

    Args:
        option: A payload mapping (returned unchanged), an http(s) URL, or a
                path to a JSON file.

    Raises:
        MalformedInputError: If the data is not a JSON object.
        FileNotFoundError: If a local path does not exist.
    """
    if isinstance(option, Mapping):
        return option
    if isinstance(option, Path):
        return parse_payload(_read_file(option), str(option))
    if not isinstance(option, str):
        raise MalformedInputError(
            f'Dictionary option must be a mapping, path or URL, got {type(option).__name__}'
        )

    if _is_url(option):
        return parse_payload(_read_url(option), option)
    return parse_payload(_read_file(Path(option)), option)
