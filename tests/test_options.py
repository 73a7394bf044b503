"""Tests for option validation and normalization."""

import re

import pytest

from blogwright_pkg.errors import InvalidConfiguration
from blogwright_pkg.options import BlogOptions, CustomCollection


class TestDefaults:
    """Test cases for default option values."""

    def test_defaults(self):
        options = BlogOptions.from_mapping()

        assert options.name == 'blog'
        assert options.permalink == '/{year}/{month}/{day}/{title}.html'
        assert options.sources == '{year}-{month}-{day}-{title}.html'
        assert options.taglink == 'tags/{tag}.html'
        assert options.per_page == 10
        assert options.page_link == 'page/{num}'
        assert options.paginate is False
        assert options.publish_future_dated is False
        assert options.custom_collections == ()
        assert options.time_zone == 'UTC'
        assert options.tz.key == 'UTC'

    def test_none_values_fall_back_to_defaults(self):
        options = BlogOptions.from_mapping({'per_page': None, 'taglink': None})
        assert options.per_page == 10
        assert options.taglink == 'tags/{tag}.html'

    def test_summary_separator_string_is_literal(self):
        options = BlogOptions.from_mapping({'summary_separator': '<!--more-->'})
        assert options.summary_separator.pattern == re.escape('<!--more-->')

    def test_summary_separator_regex(self):
        separator = re.compile(r'\(more\)')
        assert BlogOptions.from_mapping({'summary_separator': separator}).summary_separator is separator


class TestPrefix:
    """Test cases for prefix composition."""

    def test_prefix_applies_to_every_path(self):
        options = BlogOptions.from_mapping({
            'prefix': 'blog',
            'permalink': '/{year}/{title}.html',
            'custom_collections': {'category': {'link': 'categories/{category}.html', 'template': 'category.html'}},
        })

        assert options.prefix == '/blog'
        assert options.permalink == '/blog/{year}/{title}.html'
        assert options.sources == '/blog/{year}-{month}-{day}-{title}.html'
        assert options.taglink == '/blog/tags/{tag}.html'
        assert options.year_link == '/blog/{year}.html'
        assert options.month_link == '/blog/{year}/{month}.html'
        assert options.day_link == '/blog/{year}/{month}/{day}.html'
        assert options.custom_collections[0].link == '/blog/categories/{category}.html'

    def test_page_link_and_templates_are_not_prefixed(self):
        options = BlogOptions.from_mapping({'prefix': 'blog', 'tag_template': 'tag.html'})
        assert options.page_link == 'page/{num}'
        assert options.tag_template == 'tag.html'

    def test_prefix_slashes_normalized(self):
        options = BlogOptions.from_mapping({'prefix': '/blog/', 'permalink': '/{title}.html'})
        assert options.prefix == '/blog'
        assert options.permalink == '/blog/{title}.html'


class TestCalendarTemplates:
    """Test cases for the calendar template fallback."""

    def test_calendar_template_fans_out(self):
        options = BlogOptions.from_mapping({'calendar_template': 'calendar.html', 'month_template': 'month.html'})

        assert options.year_template == 'calendar.html'
        assert options.month_template == 'month.html'
        assert options.day_template == 'calendar.html'

    def test_template_paths(self):
        options = BlogOptions.from_mapping({
            'calendar_template': 'calendar.html',
            'tag_template': 'tag.html',
            'custom_collections': {'series': {'link': 'series/{series}.html', 'template': 'series.html'}},
        })
        assert options.template_paths == ('calendar.html', 'tag.html', 'series.html')


class TestValidation:
    """Test cases for rejected options."""

    @pytest.mark.parametrize('per_page', [-1, 0, 'ten', True, 2.5])
    def test_bad_per_page(self, per_page):
        with pytest.raises(InvalidConfiguration) as exc_info:
            BlogOptions.from_mapping({'per_page': per_page})
        assert exc_info.value.option == 'per_page'

    def test_unknown_time_zone(self):
        with pytest.raises(InvalidConfiguration, match='time zone'):
            BlogOptions.from_mapping({'time_zone': 'Mars/Olympus_Mons'})

    def test_known_time_zone(self):
        assert BlogOptions.from_mapping({'time_zone': 'Europe/Berlin'}).tz.key == 'Europe/Berlin'

    def test_unknown_option(self):
        with pytest.raises(InvalidConfiguration, match='unknown option'):
            BlogOptions.from_mapping({'posts_per_page': 5})

    def test_page_link_needs_num(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            BlogOptions.from_mapping({'page_link': 'page'})
        assert exc_info.value.option == 'page_link'

    def test_flags_must_be_booleans(self):
        with pytest.raises(InvalidConfiguration):
            BlogOptions.from_mapping({'paginate': 'yes'})

    def test_negative_summary_length(self):
        assert BlogOptions.from_mapping({'summary_length': -1}).summary_length == -1
        with pytest.raises(InvalidConfiguration):
            BlogOptions.from_mapping({'summary_length': -5})

    def test_summary_generator_must_be_callable(self):
        with pytest.raises(InvalidConfiguration):
            BlogOptions.from_mapping({'summary_generator': 'first paragraph'})

    def test_custom_collection_needs_template(self):
        with pytest.raises(InvalidConfiguration, match='missing template'):
            BlogOptions.from_mapping({'custom_collections': {'category': {'link': '/c/{category}.html'}}})

    def test_custom_collection_link_needs_its_token(self):
        with pytest.raises(InvalidConfiguration):
            BlogOptions.from_mapping({'custom_collections': {'category': {'link': '/c.html', 'template': 'c.html'}}})

    def test_custom_collections_keep_declaration_order(self):
        options = BlogOptions.from_mapping({'custom_collections': {
            'series': {'link': '/series/{series}.html', 'template': 'series.html'},
            'category': {'link': '/categories/{category}.html', 'template': 'category.html'},
        }})
        assert options.custom_collections == (
            CustomCollection('series', '/series/{series}.html', 'series.html'),
            CustomCollection('category', '/categories/{category}.html', 'category.html'),
        )
