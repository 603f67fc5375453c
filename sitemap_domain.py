"""Move every page of a sitemap to a different origin.

Useful when the sitemap is generated against a locally running site
(``http://localhost:8000``) that is deployed somewhere else
(``https://example.com``).
"""

import logging

from sitemap_urls import PageUrl


def parse_origin(new_origin):
    """Parse the target origin; only scheme, host and port are used."""
    return PageUrl.parse(new_origin)


def rewrite_domain(pages, new_origin, verbose=False):
    """Replace scheme, host and port of every page URL.

    Path, query and fragment stay as they are. All new URLs are built
    before any record is touched, so a failure leaves pages unchanged.
    """
    origin = parse_origin(new_origin)
    pages = list(pages)

    rewritten = [page.url.with_origin(origin) for page in pages]

    for page, url in zip(pages, rewritten):
        page.url = url

    if verbose:
        logging.info(f"Moved {len(rewritten)} pages to {origin.origin}")
    return origin
