"""
Article metadata model.

An Article is built once per matching source item on every rebuild and never mutated.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import MissingRequiredField
from .options import BlogOptions
from .paths import match, render, slugify, template_tokens
from .resources import SourceItem

logger = logging.getLogger('Blogwright.article')

# Front-matter keys with a meaning of their own; everything else is a custom property
RESERVED_KEYS = ('date', 'title', 'tags', 'published', 'lang', 'layout')

DATE_FORMATS = [
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%d %H:%M:%S %z',
    '%Y-%m-%d %H:%M %z',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d',
    '%b %d, %Y',
]

HTML_TAG_RE = re.compile(r'<[^>]+>')
ELLIPSIS = '...'


@dataclass(frozen=True)
class Article:
    source_path: str
    date: datetime
    title: str
    slug: str
    tags: Tuple[str, ...]
    custom_properties: Mapping[str, Any]
    published: bool
    language: Optional[str]
    permalink: str
    layout: Optional[str] = None
    summary: str = ''
    body: str = field(default='', repr=False)
    metadata: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def __hash__(self):
        return hash(self.source_path)

    def __getitem__(self, key):
        """Front-matter lookup, so templates can write ``article['category']``."""
        return self.metadata[key]


def parse_date(value, zone: tzinfo) -> Optional[datetime]:
    """
    Parse a front-matter date into an aware datetime in ``zone``.

    Naive values are taken to be in ``zone``; aware values are converted into it.
    Returns None if the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = None
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(value.strip(), fmt)
                break
            except ValueError:
                continue
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone)


def normalize_tags(value) -> Tuple[str, ...]:
    """Tags may be a list or a comma-separated string; blanks and duplicates are dropped."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(',')
    elif not isinstance(value, (list, tuple, set, frozenset)):
        value = [value]
    tags = []
    for tag in value:
        tag = str(tag).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


def truncate(text: str, length: int, ellipsis: str = ELLIPSIS) -> str:
    """Shorten text on a word boundary so the result, ellipsis included, fits in ``length``."""
    if length < 0 or len(text) <= length:
        return text
    limit = max(length - len(ellipsis), 0)
    cut = text[:limit]
    if not text[limit].isspace() and ' ' in cut:
        cut = cut.rsplit(' ', 1)[0]
    return cut.rstrip() + ellipsis


def summarize(body: str, options: BlogOptions) -> str:
    """Extract the summary of an article body."""
    if options.summary_generator:
        return options.summary_generator(body, options.summary_length, ELLIPSIS)
    if options.summary_separator:
        parts = options.summary_separator.split(body, maxsplit=1)
        if len(parts) > 1:
            return HTML_TAG_RE.sub('', parts[0]).strip()
    text = HTML_TAG_RE.sub('', body).strip()
    return truncate(text, options.summary_length)


def _date_from_path(tokens: Mapping[str, str], zone: tzinfo) -> Optional[datetime]:
    try:
        return datetime(int(tokens['year']), int(tokens['month']), int(tokens['day']), tzinfo=zone)
    except (KeyError, ValueError):
        return None


def _token_value(value):
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return slugify(value)
    return None


def build_article(item: SourceItem, options: BlogOptions, now: Optional[datetime] = None) -> Article:
    """
    Build the Article for one source item.

    Args:
        item: Source item supplied by the host
        options: Normalized blog options
        now: Build time used for the future-date rule; defaults to the current time

    Returns:
        The Article, permalink included

    Raises:
        MissingRequiredField: if the article has no usable date, or no title while the
            permalink needs one
        TokenResolutionError: if the permalink references a property the article lacks
    """
    now = now or datetime.now(options.tz)
    metadata = item.metadata
    path_tokens = match(options.sources, item.path) or {}

    article_date = None
    if metadata.get('date') is not None:
        article_date = parse_date(metadata['date'], options.tz)
        if article_date is None:
            logger.warning(f"Unreadable date {metadata['date']!r} in {item.path}")
    if article_date is None:
        article_date = _date_from_path(path_tokens, options.tz)
    if article_date is None:
        raise MissingRequiredField(item.path, 'date')

    title = metadata.get('title')
    title = str(title) if title is not None else path_tokens.get('title', '')
    slug = slugify(title)
    if not slug and 'title' in template_tokens(options.permalink):
        raise MissingRequiredField(item.path, 'title')

    if options.preserve_locale:
        language = options.default_locale
    else:
        language = metadata.get('lang') or path_tokens.get('lang') or options.default_locale

    published = metadata.get('published')
    if not isinstance(published, bool):
        published = not (article_date > now and not options.publish_future_dated)

    custom_properties = {key: value for key, value in metadata.items() if key not in RESERVED_KEYS}

    tokens: Dict[str, Any] = {}
    for source in (path_tokens, custom_properties):
        for key, value in source.items():
            token = _token_value(value)
            if token is not None:
                tokens[key] = token
    tokens.update({
        'year': f'{article_date.year:04d}',
        'month': f'{article_date.month:02d}',
        'day': f'{article_date.day:02d}',
        'title': slug,
        'lang': language,
    })
    permalink = render(options.permalink, tokens, source=item.path)

    return Article(
        source_path=item.path,
        date=article_date,
        title=title,
        slug=slug,
        tags=normalize_tags(metadata.get('tags')),
        custom_properties=MappingProxyType(custom_properties),
        published=published,
        language=language,
        permalink=permalink,
        layout=metadata.get('layout') or options.layout,
        summary=summarize(item.body, options),
        body=item.body,
        metadata=metadata,
    )
