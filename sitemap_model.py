"""Page records, lastmod timestamps and merge reports."""

import csv
import datetime
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from sitemap_config import HASH_LENGTH
from sitemap_errors import TimestampParseError
from sitemap_urls import PageUrl

# RFC 3339 date-time: date, 'T' (or 't' / space), time, optional fraction, offset
RFC3339_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})\Z'
)

# Lowercase hex MD5 digest
HASH_PATTERN = re.compile(f'[0-9a-f]{{{HASH_LENGTH}}}')


def is_content_hash(value):
    """Check whether value is a lowercase hex MD5 digest."""
    return isinstance(value, str) and HASH_PATTERN.fullmatch(value) is not None


def utc_now():
    """Current UTC time at second precision."""
    return datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)


def to_utc_seconds(value):
    """Convert an aware datetime to UTC and drop sub-second precision."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"lastmod must be timezone-aware, got {value!r}")
    return value.astimezone(datetime.timezone.utc).replace(microsecond=0)


def format_lastmod(value):
    """Format a datetime as 'YYYY-MM-DDTHH:MM:SSZ'."""
    v = to_utc_seconds(value)
    # strftime('%Y') does not zero-pad years before 1000 on every platform
    return f"{v.year:04d}-{v.month:02d}-{v.day:02d}T{v.hour:02d}:{v.minute:02d}:{v.second:02d}Z"


def parse_lastmod(text):
    """Parse an RFC 3339 date-time into a UTC datetime."""
    match = RFC3339_PATTERN.match(text)
    if not match:
        raise TimestampParseError(text, "input is not an RFC 3339 date-time")

    year, month, day, hour, minute, second = (int(g) for g in match.group(1, 2, 3, 4, 5, 6))
    offset = match.group(8)
    # Leap seconds are clamped to the last regular second of the minute
    if second == 60:
        second = 59
    try:
        if offset in ('Z', 'z'):
            tz = datetime.timezone.utc
        else:
            sign = -1 if offset[0] == '-' else 1
            hours, minutes = int(offset[1:3]), int(offset[4:6])
            tz = datetime.timezone(sign * datetime.timedelta(hours=hours, minutes=minutes))
        value = datetime.datetime(year, month, day, hour, minute, second, tzinfo=tz)
    except ValueError as e:
        raise TimestampParseError(text, e) from e

    return to_utc_seconds(value)


@dataclass
class PageRecord:
    """One page of the website.

    ``url`` accepts a string and is parsed into a ``PageUrl``. ``lastmod`` is
    kept in UTC at whole-second precision. ``content_hash`` is the MD5 hex
    digest of the page body, used to detect changes between runs.
    """

    url: PageUrl
    lastmod: Optional[datetime.datetime] = None
    content_hash: Optional[str] = None

    def __post_init__(self):
        self.url = PageUrl.parse(self.url)
        if self.lastmod is not None:
            self.lastmod = to_utc_seconds(self.lastmod)
        if self.content_hash is not None and not is_content_hash(self.content_hash):
            raise ValueError(f"content_hash must be {HASH_LENGTH} lowercase hex characters, got {self.content_hash!r}")


@dataclass(frozen=True)
class UpdateInfo:
    """Outcome of merging a new sitemap with an old one.

    Every list is sorted and duplicate-free. New, updated and unchanged pages
    together cover the new sitemap; removed pages exist only in the old one.
    """

    new_pages: Tuple[PageUrl, ...] = field(default_factory=tuple)
    updated_pages: Tuple[PageUrl, ...] = field(default_factory=tuple)
    unchanged_pages: Tuple[PageUrl, ...] = field(default_factory=tuple)
    removed_pages: Tuple[PageUrl, ...] = field(default_factory=tuple)

    def __post_init__(self):
        for name in ('new_pages', 'updated_pages', 'unchanged_pages', 'removed_pages'):
            object.__setattr__(self, name, tuple(sorted(set(getattr(self, name)))))

    def summary(self):
        return (f"{len(self.new_pages)} new, {len(self.updated_pages)} updated, "
                f"{len(self.unchanged_pages)} unchanged, {len(self.removed_pages)} removed")

    def rows(self):
        """Yield (status, url) pairs grouped by status."""
        for status, urls in (("New", self.new_pages), ("Updated", self.updated_pages),
                             ("Unchanged", self.unchanged_pages), ("Removed", self.removed_pages)):
            for url in urls:
                yield status, str(url)

    def write_csv(self, output_file):
        """Write the report as a Status,URL CSV file."""
        with open(output_file, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(["Status", "URL"])
            for status, url in self.rows():
                writer.writerow([status, url])
