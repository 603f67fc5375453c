"""Merge a freshly crawled sitemap with the previously published one."""

import logging

from sitemap_model import UpdateInfo


def is_unchanged(page, old_page):
    """Check whether an old record proves the page content did not change."""
    if old_page.content_hash is None or old_page.lastmod is None:
        return False
    return old_page.content_hash == page.content_hash


def combine_pages(pages, old_pages, verbose=False):
    """Carry unchanged lastmods over from old_pages and classify every URL.

    Records in pages are updated in place: an unchanged page gets the old
    lastmod back, everything else keeps its freshly observed one. Nothing
    is added, dropped or reordered.
    """
    # Old pages keyed by URL; matched entries are consumed
    remaining = {old_page.url: old_page for old_page in old_pages}

    new_pages = []
    updated_pages = []
    unchanged_pages = []

    for page in pages:
        old_page = remaining.pop(page.url, None)
        if old_page is None:
            new_pages.append(page.url)
        elif is_unchanged(page, old_page):
            page.lastmod = old_page.lastmod
            unchanged_pages.append(page.url)
        else:
            updated_pages.append(page.url)

    # Whatever was never matched is gone from the site
    info = UpdateInfo(
        new_pages=new_pages,
        updated_pages=updated_pages,
        unchanged_pages=unchanged_pages,
        removed_pages=list(remaining),
    )

    if verbose:
        logging.info(f"Combined with old sitemap: {info.summary()}")
    return info
