"""Utility functions for loading type descriptor documents.

Descriptor documents are JSON exported by the host toolchain. They can be
read from a local file, a URL, or any open text stream, and are parsed into
TypeElement objects for the generators.
"""

import json
from pathlib import Path
from typing import Any, List, Optional, TextIO, Tuple, Union
from urllib.parse import urlparse

import requests

from .codegen.core.elements import DescriptorError, TypeElement, parse_type_elements
from .logging_config import get_logger

logger = get_logger(__name__)


class DescriptorLoaderError(Exception):
    """Raised when a descriptor document cannot be loaded."""

    pass


def load_json_from_file(file_path: Union[str, Path]) -> Tuple[str, Any]:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        DescriptorLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Loading descriptors from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning("File does not have .json extension: %s", file_path)

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in file %s: %s", file_path, e)
        raise DescriptorLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise DescriptorLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded descriptors from %s", file_path)
    return str(file_path), data


def load_json_from_url(url: str, timeout: int = 30) -> Tuple[str, Any]:
    """Load JSON data from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        DescriptorLoaderError: If the URL is invalid, the request fails, or
            the response isn't valid JSON.
    """
    logger.debug("Loading descriptors from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error("Invalid URL format: %s", url)
        raise DescriptorLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning("URL %s does not have JSON content type: %s", url, content_type)

        data = response.json()
    except requests.exceptions.Timeout:
        logger.error("Request timeout for URL: %s", url)
        raise DescriptorLoaderError(f"Request timeout for URL: {url}")
    except requests.exceptions.ConnectionError as e:
        logger.error("Connection error for URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error("HTTP error %s for URL: %s", e.response.status_code, url)
        raise DescriptorLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.JSONDecodeError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.error("Request error for URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error("Invalid JSON response from URL %s: %s", url, e)
        raise DescriptorLoaderError(f"Invalid JSON response from URL {url}: {e}") from e

    logger.info("Loaded descriptors from %s", url)
    return url, data


def load_json_from_stream(stream: TextIO, name: str = "<stdin>") -> Tuple[str, Any]:
    """Load JSON data from an open text stream."""
    try:
        return name, json.load(stream)
    except json.JSONDecodeError as e:
        raise DescriptorLoaderError(f"Invalid JSON in {name}: {e}") from e


def load_json(
    file_path: Optional[Union[str, Path]] = None,
    url: Optional[str] = None,
    timeout: int = 30,
) -> Tuple[str, Any]:
    """Load JSON data from either a file or URL.

    Raises:
        DescriptorLoaderError: If neither or both sources are given, or
            loading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if not file_path and not url:
        raise DescriptorLoaderError("Either file_path or url must be provided")

    if file_path and url:
        raise DescriptorLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_json_from_file(file_path)
    return load_json_from_url(url, timeout)


def load_descriptors(
    file_path: Optional[Union[str, Path]] = None,
    url: Optional[str] = None,
    timeout: int = 30,
) -> Tuple[str, List[TypeElement]]:
    """Load and parse a descriptor document.

    Returns:
        Tuple of (source description, parsed type elements).

    Raises:
        DescriptorLoaderError: If loading fails.
        DescriptorError: If the document is not a valid descriptor document.
    """
    source, data = load_json(file_path, url, timeout)
    return source, parse_descriptors(data, source)


def parse_descriptors(data: Any, source: str = "<document>") -> List[TypeElement]:
    """Parse already-loaded JSON, naming ``source`` in any error."""
    try:
        elements = parse_type_elements(data)
    except DescriptorError as e:
        raise DescriptorError(f"{source}: {e}") from e
    logger.debug("Parsed %d type(s) from %s", len(elements), source)
    return elements
