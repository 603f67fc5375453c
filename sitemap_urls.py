"""Absolute page URLs kept in one canonical string form.

Two spellings of the same page (``HTTPS://Example.com`` and
``https://example.com/``) parse to equal ``PageUrl`` values, so the canonical
string doubles as the key for lookups and the order for sorting.
"""

import functools
from urllib.parse import unquote, urlsplit

from sitemap_config import ALLOWED_SCHEMES
from sitemap_errors import InvalidUrlError, UnsupportedSchemeError

DEFAULT_PORTS = {'http': 80, 'https': 443}

# Printable ASCII that still has to be percent-encoded, per component
PATH_ENCODE_SET = frozenset(' "#<>?`{}')
QUERY_ENCODE_SET = frozenset(' "#<>\'')
FRAGMENT_ENCODE_SET = frozenset(' "<>`')
USERINFO_ENCODE_SET = frozenset(' "#<>?`{}/:;=@[\\]^|')

FORBIDDEN_HOST_CHARS = frozenset(' #%/:<>?@[\\]^|')


def percent_encode(text, encode_set):
    """Percent-encode controls, non-ASCII and anything in encode_set."""
    out = []
    for char in text:
        if char in encode_set or not 0x20 < ord(char) < 0x7f:
            out.append(''.join(f'%{b:02X}' for b in char.encode('utf-8', 'surrogatepass')))
        else:
            out.append(char)
    return ''.join(out)


def remove_dot_segments(path):
    """Resolve '.' and '..' segments of an absolute path."""
    segments = path.split('/')[1:]
    output = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment == '.':
            if last:
                output.append('')
        elif segment == '..':
            if output:
                output.pop()
            if last:
                output.append('')
        else:
            output.append(segment)
    return '/' + '/'.join(output)


def _parse_host(host):
    if host.startswith('['):
        # IPv6 literal, compared case-insensitively
        if not host.endswith(']') or len(host) < 3:
            raise InvalidUrlError("invalid IPv6 address")
        return host.lower()

    if '%' in host:
        host = unquote(host)
    if not host:
        raise InvalidUrlError("empty host")

    if not host.isascii():
        try:
            host = host.encode('idna').decode('ascii')
        except UnicodeError as e:
            raise InvalidUrlError(f"invalid international domain name: {e}") from e

    host = host.lower()
    if any(char in FORBIDDEN_HOST_CHARS or ord(char) < 0x20 or ord(char) == 0x7f for char in host):
        raise InvalidUrlError("invalid domain character")
    return host


def _split_netloc(netloc):
    """Split a netloc into (userinfo, host, port)."""
    userinfo, _, hostport = netloc.rpartition('@')

    if hostport.startswith('['):
        end = hostport.find(']')
        if end == -1:
            raise InvalidUrlError("invalid IPv6 address")
        host, rest = hostport[:end + 1], hostport[end + 1:]
        if rest and not rest.startswith(':'):
            raise InvalidUrlError("invalid port number")
        port_text = rest[1:]
    else:
        host, _, port_text = hostport.partition(':')

    port = None
    if port_text:
        if not port_text.isdigit() or not port_text.isascii() or int(port_text) > 65535:
            raise InvalidUrlError("invalid port number")
        port = int(port_text)

    return userinfo, _parse_host(host), port


@functools.total_ordering
class PageUrl:
    """An absolute http(s) URL.

    Equality, hashing and ordering all follow the canonical string, which
    orders by scheme, then authority, then path, query and fragment.
    """

    def __init__(self, scheme, host, port=None, path='/', query=None, fragment=None, userinfo=''):
        if scheme not in ALLOWED_SCHEMES:
            raise UnsupportedSchemeError()
        self.scheme = scheme
        self.userinfo = userinfo
        self.host = host
        # Default ports are never stored
        self.port = None if port == DEFAULT_PORTS[scheme] else port
        self.path = path or '/'
        self.query = query
        self.fragment = fragment
        self._text = self._serialize()

    @classmethod
    def parse(cls, text):
        """Parse text into a canonical PageUrl, raising InvalidUrlError on failure."""
        if isinstance(text, PageUrl):
            return text
        if not isinstance(text, str):
            raise InvalidUrlError(f"expected a URL string, got {type(text).__name__}")

        text = text.strip()
        if not text:
            raise InvalidUrlError("empty URL")

        try:
            parts = urlsplit(text)
        except ValueError as e:
            raise InvalidUrlError(str(e)) from e

        if not parts.scheme:
            raise InvalidUrlError("relative URL without a base")
        if parts.scheme not in ALLOWED_SCHEMES:
            raise UnsupportedSchemeError()
        if not parts.netloc:
            raise InvalidUrlError("empty host")

        userinfo, host, port = _split_netloc(parts.netloc)

        # Backslashes act as path separators in http(s) URLs
        path = remove_dot_segments(parts.path.replace('\\', '/') or '/')

        # urlsplit reports '?' and '#' with nothing after them as absent
        before_fragment, has_fragment, _ = text.partition('#')
        has_query = '?' in before_fragment

        return cls(
            scheme=parts.scheme,
            host=host,
            port=port,
            path=percent_encode(path, PATH_ENCODE_SET),
            query=percent_encode(parts.query, QUERY_ENCODE_SET) if has_query else None,
            fragment=percent_encode(parts.fragment, FRAGMENT_ENCODE_SET) if has_fragment else None,
            userinfo=percent_encode(userinfo, USERINFO_ENCODE_SET.difference(':')),
        )

    def _serialize(self):
        text = f"{self.scheme}://"
        if self.userinfo:
            text += f"{self.userinfo}@"
        text += self.host
        if self.port is not None:
            text += f":{self.port}"
        text += self.path
        if self.query is not None:
            text += f"?{self.query}"
        if self.fragment is not None:
            text += f"#{self.fragment}"
        return text

    @property
    def origin(self):
        """Scheme, host and port, e.g. 'http://localhost:3000'."""
        origin = f"{self.scheme}://{self.host}"
        if self.port is not None:
            origin += f":{self.port}"
        return origin

    def with_origin(self, origin):
        """Return a copy with scheme, host and port taken from origin."""
        origin = PageUrl.parse(origin)
        return PageUrl(
            scheme=origin.scheme,
            host=origin.host,
            port=origin.port,
            path=self.path,
            query=self.query,
            fragment=self.fragment,
            userinfo=self.userinfo,
        )

    def __str__(self):
        return self._text

    def __repr__(self):
        return f"PageUrl({self._text!r})"

    def __eq__(self, other):
        if not isinstance(other, PageUrl):
            return NotImplemented
        return self._text == other._text

    def __lt__(self, other):
        if not isinstance(other, PageUrl):
            return NotImplemented
        return self._text < other._text

    def __hash__(self):
        return hash(self._text)
