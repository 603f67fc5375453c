"""
Sitemaps with automatically updated lastmods.

A sitemap is regenerated from a crawl on every run. Each page carries an MD5
hash of its content inside an ``xhtml:meta`` element, so the next run can
tell which pages really changed and keep the old ``lastmod`` for the rest.

Typical use:

    sitemap = Sitemap.generate("http://localhost:8000", crawler)
    sitemap.sort_by_url()
    old_sitemap = Sitemap.import_sitemap("https://example.com/sitemap.xml")
    sitemap.update_domain("https://example.com")
    info = sitemap.combine_with_old_sitemap(old_sitemap)
    sitemap.write("public/sitemap.xml")
"""

import logging
from dataclasses import dataclass, field
from typing import List

from sitemap_config import REQUEST_TIMEOUT, XML_INDENT
from sitemap_domain import rewrite_domain
from sitemap_errors import NoPagesError
from sitemap_import import fetch_source
from sitemap_merge import combine_pages
from sitemap_model import PageRecord, UpdateInfo
from sitemap_pages import build_pages
from sitemap_urls import PageUrl
from sitemap_xml import decode_pages, encode_pages

__all__ = ["Sitemap", "PageRecord", "PageUrl", "UpdateInfo"]


@dataclass
class Sitemap:
    """Pages of the website, in the order they were added."""

    pages: List[PageRecord] = field(default_factory=list)

    @classmethod
    def from_crawled_pages(cls, crawled, now=None, verbose=False):
        """Build a sitemap from (url, body) pairs, hashing every body."""
        pages = build_pages(crawled, now=now, verbose=verbose)
        if not pages:
            raise NoPagesError()
        return cls(pages=pages)

    @classmethod
    def generate(cls, website_url, crawler, now=None, verbose=False):
        """Generate a sitemap by crawling website_url.

        crawler is called with the seed URL string and must yield
        (url, body) pairs for every page it reaches.
        """
        seed = PageUrl.parse(website_url)
        if verbose:
            logging.info(f"Crawling {seed}")
        return cls.from_crawled_pages(crawler(str(seed)), now=now, verbose=verbose)

    @classmethod
    def deserialize(cls, data):
        """Parse sitemap XML. Unknown elements are ignored."""
        return cls(pages=decode_pages(data))

    @classmethod
    def import_sitemap(cls, url_or_filepath, timeout=REQUEST_TIMEOUT, retry_delays=None, verbose=False):
        """Import a sitemap from a URL or a local file."""
        data = fetch_source(url_or_filepath, timeout=timeout, retry_delays=retry_delays, verbose=verbose)
        sitemap = cls.deserialize(data)
        if verbose:
            logging.info(f"Imported {len(sitemap)} pages from {url_or_filepath}")
        return sitemap

    def serialize(self, indent=XML_INDENT):
        """Serialize to sitemap XML bytes."""
        return encode_pages(self.pages, indent=indent)

    def write(self, path, indent=XML_INDENT):
        """Serialize to a file; nothing is written if serialization fails."""
        data = self.serialize(indent=indent)
        with open(path, 'wb') as f:
            f.write(data)
        logging.info(f"Wrote {len(self)} pages to {path}")

    def sort_by_url(self):
        self.pages.sort(key=lambda page: page.url)

    def urls(self):
        return [page.url for page in self.pages]

    def combine_with_old_sitemap(self, old_sitemap, verbose=False):
        """Use the old lastmod where the hash is unchanged, the new one otherwise.

        Pages missing from this sitemap are reported as removed, not added back.
        """
        return combine_pages(self.pages, old_sitemap.pages, verbose=verbose)

    def update_domain(self, new_domain, verbose=False):
        """Replace scheme, host and port of every page with those of new_domain."""
        rewrite_domain(self.pages, new_domain, verbose=verbose)

    def __len__(self):
        return len(self.pages)
