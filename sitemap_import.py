"""Fetch a previously published sitemap from a URL or a local file."""

import enum
import logging
import time
from typing import NamedTuple

from curl_cffi import requests

from sitemap_config import REQUEST_TIMEOUT, RETRY_DELAYS, RETRYABLE_ERRORS
from sitemap_errors import SitemapImportError


class SourceKind(enum.Enum):
    URL = "url"
    FILE = "file"


class SitemapSource(NamedTuple):
    kind: SourceKind
    location: str


def classify_source(url_or_filepath):
    """Decide whether a source string is an http(s) URL or a file path."""
    if isinstance(url_or_filepath, SitemapSource):
        return url_or_filepath
    if url_or_filepath.startswith(('http://', 'https://')):
        return SitemapSource(SourceKind.URL, url_or_filepath)
    return SitemapSource(SourceKind.FILE, url_or_filepath)


def is_retryable(error):
    error_message = str(error).lower()
    return any(err in error_message for err in RETRYABLE_ERRORS)


def fetch_url(url, timeout=REQUEST_TIMEOUT, retry_delays=None, verbose=False):
    """Download a sitemap, retrying connection errors with exponential backoff."""
    if retry_delays is None:
        retry_delays = RETRY_DELAYS
    if verbose:
        logging.info(f"Fetching sitemap from {url}")

    attempts = len(retry_delays) or 1
    for retry in range(attempts):
        try:
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            return response.content
        except Exception as e:
            # Only retry for connection-related errors
            if is_retryable(e) and retry < attempts - 1:
                delay = retry_delays[retry]
                logging.warning(f"Connection error fetching {url}, retrying in {delay}s (attempt {retry+1}/{attempts}): {e}")
                time.sleep(delay)
                continue
            raise SitemapImportError(f"failed to get {url}: {e}") from e


def read_file(filepath, verbose=False):
    """Read a sitemap from disk."""
    if verbose:
        logging.info(f"Reading sitemap from {filepath}")
    try:
        with open(filepath, 'rb') as f:
            return f.read()
    except OSError as e:
        raise SitemapImportError(f"failed to open {filepath}: {e}") from e


def fetch_source(url_or_filepath, timeout=REQUEST_TIMEOUT, retry_delays=None, verbose=False):
    """Return the raw bytes of a sitemap URL or file."""
    source = classify_source(url_or_filepath)
    if source.kind is SourceKind.URL:
        return fetch_url(source.location, timeout=timeout, retry_delays=retry_delays, verbose=verbose)
    return read_file(source.location, verbose=verbose)
