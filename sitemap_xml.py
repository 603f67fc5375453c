"""Read and write sitemap XML with embedded page content hashes.

Each page is written as::

    <url>
      <loc>https://example.com/</loc>
      <lastmod>1970-01-01T00:01:01Z</lastmod>
      <xhtml:meta name="auto_sitemap_md5_hash" content="0123456789abcdef0123456789abcdef" />
    </url>

``lastmod`` and the meta element are left out when the page has no
timestamp or no hash. Sitemap consumers that don't know the xhtml extension
simply ignore it.
"""

import logging
import xml.etree.ElementTree as ET

from sitemap_config import HASH_META_NAME, SITEMAP_NAMESPACE, XHTML_NAMESPACE, XML_INDENT
from sitemap_errors import MissingLocationError, XmlSyntaxError
from sitemap_model import PageRecord, format_lastmod, is_content_hash, parse_lastmod
from sitemap_urls import PageUrl

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'

META_TAG = f'{{{XHTML_NAMESPACE}}}meta'


def local_name(tag):
    """Strip the namespace from a tag like '{ns}url' -> 'url'."""
    if '}' in tag:
        return tag.split('}', 1)[1]
    return tag


def is_sitemap_tag(tag, name):
    """Match a sitemap element, with or without the sitemap namespace."""
    return tag == name or tag == f'{{{SITEMAP_NAMESPACE}}}{name}'


def encode_pages(pages, indent=XML_INDENT):
    """Serialize page records to an indented UTF-8 sitemap document."""
    urlset = ET.Element('urlset')
    urlset.set('xmlns', SITEMAP_NAMESPACE)
    urlset.set('xmlns:xhtml', XHTML_NAMESPACE)

    count = 0
    for page in pages:
        url_element = ET.SubElement(urlset, 'url')
        ET.SubElement(url_element, 'loc').text = str(page.url)

        if page.lastmod is not None:
            ET.SubElement(url_element, 'lastmod').text = format_lastmod(page.lastmod)

        if page.content_hash is not None:
            meta = ET.SubElement(url_element, 'xhtml:meta')
            meta.set('name', HASH_META_NAME)
            meta.set('content', page.content_hash)
        count += 1

    ET.indent(urlset, space=indent)
    try:
        body = ET.tostring(urlset, encoding='unicode')
    except (TypeError, ValueError) as e:
        raise XmlSyntaxError(f"failed to serialize: {e}") from e

    logging.debug(f"Serialized {count} pages")
    return (XML_DECLARATION + body + '\n').encode('utf-8')


def decode_hash(meta):
    """Return the content hash carried by a meta element, or None."""
    name = (meta.get('name') or '').strip()
    content = (meta.get('content') or '').strip()
    if name == HASH_META_NAME and is_content_hash(content):
        return content
    return None


def decode_page(url_element):
    """Build a PageRecord from one <url> element."""
    loc = None
    lastmod = None
    content_hash = None

    for child in url_element:
        if is_sitemap_tag(child.tag, 'loc'):
            if loc is None:
                loc = child.text or ''
        elif is_sitemap_tag(child.tag, 'lastmod'):
            if lastmod is None:
                lastmod = parse_lastmod((child.text or '').strip())
        elif child.tag == META_TAG:
            # First qualifying meta wins
            if content_hash is None:
                content_hash = decode_hash(child)
        # Anything else is ignored

    if loc is None:
        raise MissingLocationError()

    return PageRecord(url=PageUrl.parse(loc), lastmod=lastmod, content_hash=content_hash)


def decode_pages(data):
    """Parse a sitemap document (bytes or str) into page records.

    Decoding is all-or-nothing: one bad <url> element fails the document.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise XmlSyntaxError(f"failed to deserialize: {e}") from e

    if not is_sitemap_tag(root.tag, 'urlset'):
        raise XmlSyntaxError(f"failed to deserialize: expected <urlset>, found <{local_name(root.tag)}>")

    pages = [decode_page(element) for element in root if is_sitemap_tag(element.tag, 'url')]

    logging.debug(f"Deserialized {len(pages)} pages")
    return pages
