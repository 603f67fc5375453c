"""Turn crawled (url, body) pairs into page records."""

import hashlib
import logging

from tqdm import tqdm

from sitemap_model import PageRecord, to_utc_seconds, utc_now


def normalize_content(body):
    """Trim surrounding whitespace and normalize line endings to '\\n'."""
    if isinstance(body, str):
        body = body.encode('utf-8')
    return body.strip().replace(b'\r\n', b'\n')


def hash_page_content(body):
    """Return the MD5 hex digest of a normalized page body."""
    return hashlib.md5(normalize_content(body)).hexdigest()


def build_pages(crawled, now=None, verbose=False):
    """Hash every crawled page and stamp it with the observation time."""
    lastmod = utc_now() if now is None else to_utc_seconds(now)
    pages = []

    # Progress bar for non-verbose mode
    progress_bar = None
    if verbose:
        logging.info("Hashing crawled pages")
    else:
        progress_bar = tqdm(desc="Pages hashed", unit="pages", dynamic_ncols=True)

    try:
        for url, body in crawled:
            page = PageRecord(url=url, lastmod=lastmod, content_hash=hash_page_content(body))
            pages.append(page)
            if verbose:
                logging.debug(f"Hashed {page.url}: {page.content_hash}")
            elif progress_bar:
                progress_bar.update(1)
    finally:
        if progress_bar:
            progress_bar.close()

    if verbose:
        logging.info(f"Hashed {len(pages)} pages")
    return pages
