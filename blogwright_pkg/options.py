"""
Blog options: defaults, validation and normalization.

Options are validated once, when a Blog is created, and are read-only afterwards.
"""

import re
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Any, Callable, Dict, Mapping, Optional, Pattern, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidConfiguration
from .paths import join_prefix, template_tokens

DEFAULT_OPTIONS = {
    'name': None,
    'prefix': None,
    'permalink': '/{year}/{month}/{day}/{title}.html',
    'sources': '{year}-{month}-{day}-{title}.html',
    'taglink': 'tags/{tag}.html',
    'layout': 'layout',
    'summary_separator': 'READMORE',
    'summary_length': 250,
    'summary_generator': None,
    'year_link': '/{year}.html',
    'month_link': '/{year}/{month}.html',
    'day_link': '/{year}/{month}/{day}.html',
    'calendar_template': None,
    'year_template': None,
    'month_template': None,
    'day_template': None,
    'tag_template': None,
    'generate_year_pages': True,
    'generate_month_pages': True,
    'generate_day_pages': True,
    'generate_tag_pages': True,
    'paginate': False,
    'per_page': 10,
    'page_link': 'page/{num}',
    'publish_future_dated': False,
    'custom_collections': {},
    'preserve_locale': False,
    'time_zone': 'UTC',
    'default_locale': None,
    'new_article_template': None,
    'default_extension': '.md',
}

PATH_OPTIONS = ('permalink', 'sources', 'taglink', 'year_link', 'month_link', 'day_link', 'page_link')
TEMPLATE_OPTIONS = ('calendar_template', 'year_template', 'month_template', 'day_template', 'tag_template',
                    'new_article_template', 'layout', 'name', 'prefix', 'default_locale')
FLAG_OPTIONS = ('generate_year_pages', 'generate_month_pages', 'generate_day_pages', 'generate_tag_pages',
                'paginate', 'publish_future_dated', 'preserve_locale')


@dataclass(frozen=True)
class CustomCollection:
    """Articles grouped on an arbitrary front-matter property."""
    property: str
    link: str
    template: str


@dataclass(frozen=True)
class BlogOptions:
    name: str
    prefix: Optional[str]
    permalink: str
    sources: str
    taglink: str
    layout: Optional[str]
    summary_separator: Optional[Pattern]
    summary_length: int
    summary_generator: Optional[Callable]
    year_link: str
    month_link: str
    day_link: str
    calendar_template: Optional[str]
    year_template: Optional[str]
    month_template: Optional[str]
    day_template: Optional[str]
    tag_template: Optional[str]
    generate_year_pages: bool
    generate_month_pages: bool
    generate_day_pages: bool
    generate_tag_pages: bool
    paginate: bool
    per_page: int
    page_link: str
    publish_future_dated: bool
    custom_collections: Tuple[CustomCollection, ...]
    preserve_locale: bool
    time_zone: str
    default_locale: Optional[str]
    new_article_template: Optional[str]
    default_extension: str
    tz: tzinfo = field(repr=False, compare=False, default=None)

    @classmethod
    def from_mapping(cls, config: Optional[Mapping[str, Any]] = None) -> 'BlogOptions':
        """
        Validate and normalize raw options.

        Applies the prefix to every path-bearing option and fans the calendar template
        out to the year, month and day templates.

        Raises:
            InvalidConfiguration: on unknown options or malformed values
        """
        config = dict(config or {})
        unknown = sorted(set(config) - set(DEFAULT_OPTIONS))
        if unknown:
            raise InvalidConfiguration(unknown[0], "unknown option")

        values: Dict[str, Any] = dict(DEFAULT_OPTIONS)
        values.update({key: value for key, value in config.items() if value is not None})

        for key in PATH_OPTIONS:
            if not isinstance(values[key], str) or not values[key]:
                raise InvalidConfiguration(key, "expected a non-empty path template")
        for key in TEMPLATE_OPTIONS:
            if values[key] is not None and not isinstance(values[key], str):
                raise InvalidConfiguration(key, "expected a string")
        for key in FLAG_OPTIONS:
            if not isinstance(values[key], bool):
                raise InvalidConfiguration(key, "expected true or false")

        per_page = values['per_page']
        if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page < 1:
            raise InvalidConfiguration('per_page', f"expected a positive integer, got {per_page!r}")

        summary_length = values['summary_length']
        if isinstance(summary_length, bool) or not isinstance(summary_length, int) or summary_length < -1:
            raise InvalidConfiguration('summary_length', f"expected -1 or a non-negative integer, got {summary_length!r}")

        if 'num' not in template_tokens(values['page_link']):
            raise InvalidConfiguration('page_link', "must contain the {num} token")

        if values['summary_generator'] is not None and not callable(values['summary_generator']):
            raise InvalidConfiguration('summary_generator', "expected a callable")

        values['summary_separator'] = _compile_separator(values['summary_separator'])
        values['custom_collections'] = _parse_custom_collections(values['custom_collections'])

        try:
            values['tz'] = ZoneInfo(values['time_zone'])
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            raise InvalidConfiguration('time_zone', f"time zone {values['time_zone']!r} not recognized")

        if not isinstance(values['default_extension'], str):
            raise InvalidConfiguration('default_extension', "expected a string")

        values['name'] = values['name'] or 'blog'

        # Allow one setting to set all the calendar templates
        if values['calendar_template']:
            for key in ('year_template', 'month_template', 'day_template'):
                values[key] = values[key] or values['calendar_template']

        # If a prefix is set, every generated path lives below it
        prefix = values['prefix']
        if prefix:
            prefix = values['prefix'] = '/' + prefix.strip('/')
            for key in ('permalink', 'sources', 'taglink', 'year_link', 'month_link', 'day_link'):
                values[key] = join_prefix(prefix, values[key])
            values['custom_collections'] = tuple(
                CustomCollection(collection.property, join_prefix(prefix, collection.link), collection.template)
                for collection in values['custom_collections']
            )

        return cls(**values)

    @property
    def template_paths(self) -> Tuple[str, ...]:
        """Every configured page template; none of them is published at its own path."""
        templates = [self.calendar_template, self.year_template, self.month_template,
                     self.day_template, self.tag_template]
        templates.extend(collection.template for collection in self.custom_collections)
        return tuple(dict.fromkeys(template for template in templates if template))


def _compile_separator(separator):
    if separator is None or isinstance(separator, re.Pattern):
        return separator
    if isinstance(separator, str):
        return re.compile(re.escape(separator)) if separator else None
    raise InvalidConfiguration('summary_separator', "expected a string or a regular expression")


def _parse_custom_collections(collections) -> Tuple[CustomCollection, ...]:
    if not isinstance(collections, Mapping):
        raise InvalidConfiguration('custom_collections', "expected a mapping of property to {link, template}")

    parsed = []
    for prop, settings in collections.items():
        if not isinstance(settings, Mapping):
            raise InvalidConfiguration(f'custom_collections.{prop}', "expected a mapping with link and template")
        link = settings.get('link')
        template = settings.get('template')
        if not isinstance(link, str) or not link:
            raise InvalidConfiguration(f'custom_collections.{prop}', "missing link")
        if prop not in template_tokens(link):
            raise InvalidConfiguration(f'custom_collections.{prop}', f"link must contain the {{{prop}}} token")
        if not isinstance(template, str) or not template:
            raise InvalidConfiguration(f'custom_collections.{prop}', "missing template")
        parsed.append(CustomCollection(str(prop), link, template))
    return tuple(parsed)
