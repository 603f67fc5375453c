# Configuration for sitemap generation and import.
# Every value here can be overridden through keyword arguments
# on the function that uses it.

# Namespaces written on the <urlset> root
SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"

# Name of the <xhtml:meta> element carrying the page content hash
HASH_META_NAME = "auto_sitemap_md5_hash"

# Length of a hex MD5 digest
HASH_LENGTH = 32

# Indentation unit for serialized sitemaps
XML_INDENT = "  "

# Network timeout for sitemap imports (seconds)
REQUEST_TIMEOUT = 10

# Retry delays for exponential backoff on connection errors
RETRY_DELAYS = [1, 2, 4, 8, 16, 32]

# Error message fragments that mark a connection error worth retrying
RETRYABLE_ERRORS = [
    'connection reset', 'connection timed out', 'timeout',
    'recv failure', 'operation timed out'
]

# Schemes a page URL may use
ALLOWED_SCHEMES = ('http', 'https')
