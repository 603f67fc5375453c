"""Exceptions raised while reading, merging and rewriting sitemaps."""


class SitemapError(Exception):
    """Base class for every sitemap failure."""


class InvalidUrlError(SitemapError, ValueError):
    """A page, seed or origin URL could not be parsed as an absolute URL."""


class UnsupportedSchemeError(InvalidUrlError):
    """The URL scheme is something other than http or https."""

    def __init__(self, message="URL should start with http:// or https://"):
        super().__init__(message)


class MissingLocationError(SitemapError, ValueError):
    """A <url> element has no <loc> child."""

    def __init__(self, message="page URL is missing"):
        super().__init__(message)


class TimestampParseError(SitemapError, ValueError):
    """A <lastmod> value is not an RFC 3339 date-time."""

    def __init__(self, text, reason):
        self.text = text
        super().__init__(f"failed to deserialize `{text}`: {reason}")


class XmlSyntaxError(SitemapError, ValueError):
    """The document is not well-formed XML or is not a <urlset>."""


class SitemapImportError(SitemapError, OSError):
    """The sitemap could not be fetched from a URL or read from disk."""


class NoPagesError(SitemapError):
    """The crawl did not return a single page."""

    def __init__(self, message="failed to get pages"):
        super().__init__(message)
