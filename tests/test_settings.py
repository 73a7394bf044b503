"""Tests for configuration file loading."""

import json
from pathlib import Path

import pytest

from blogwright_pkg.errors import InvalidConfiguration
from blogwright_pkg.options import BlogOptions
from blogwright_pkg.settings import BlogSettings


class TestBlogSettings:
    """Test cases for BlogSettings."""

    def test_defaults_without_config_file(self, temp_dir):
        settings = BlogSettings(temp_dir).load_settings()

        assert settings['content'] == 'content'
        assert settings['output'] == 'output'
        assert settings['manifest'] == 'manifest.json'
        assert settings['per_page'] == 10
        assert settings['taglink'] == 'tags/{tag}.html'

    def test_yaml_config(self, temp_dir):
        Path(temp_dir, 'blogwright.yml').write_text("prefix: blog\npaginate: true\nper_page: 5\n")
        loader = BlogSettings(temp_dir)
        settings = loader.load_settings()

        assert settings['prefix'] == 'blog'
        assert settings['paginate'] is True
        assert settings['per_page'] == 5
        assert loader.config_file_path.endswith('blogwright.yml')

    def test_json_config(self, temp_dir):
        Path(temp_dir, 'blogwright.json').write_text(json.dumps({'tag_template': 'tag.html'}))
        assert BlogSettings(temp_dir).load_settings()['tag_template'] == 'tag.html'

    def test_yaml_preferred_over_json(self, temp_dir):
        Path(temp_dir, 'blogwright.yml').write_text("per_page: 3\n")
        Path(temp_dir, 'blogwright.json').write_text(json.dumps({'per_page': 7}))
        assert BlogSettings(temp_dir).load_settings()['per_page'] == 3

    def test_empty_config_file(self, temp_dir):
        Path(temp_dir, 'blogwright.yml').write_text("")
        assert BlogSettings(temp_dir).load_settings()['per_page'] == 10

    def test_unknown_keys_ignored(self, temp_dir, caplog):
        Path(temp_dir, 'blogwright.yml').write_text("posts_per_page: 5\nper_page: 4\n")
        settings = BlogSettings(temp_dir).load_settings()

        assert 'posts_per_page' not in settings
        assert settings['per_page'] == 4
        assert "Ignoring unknown setting 'posts_per_page'" in caplog.text

    def test_invalid_yaml(self, temp_dir):
        Path(temp_dir, 'blogwright.yml').write_text("prefix: [blog\n")
        with pytest.raises(InvalidConfiguration, match='invalid YAML'):
            BlogSettings(temp_dir).load_settings()

    def test_invalid_json(self, temp_dir):
        Path(temp_dir, 'blogwright.json').write_text("{not json")
        with pytest.raises(InvalidConfiguration, match='invalid JSON'):
            BlogSettings(temp_dir).load_settings()

    def test_config_must_be_a_mapping(self, temp_dir):
        Path(temp_dir, 'blogwright.yml').write_text("- prefix\n- blog\n")
        with pytest.raises(InvalidConfiguration, match='expected a mapping'):
            BlogSettings(temp_dir).load_settings()

    @pytest.mark.parametrize('file_format', ['yml', 'json'])
    def test_sample_config_is_valid(self, temp_dir, file_format):
        loader = BlogSettings(temp_dir)
        config_path = loader.create_sample_config(file_format)

        assert Path(config_path).name == f'blogwright.{file_format}'
        settings = BlogSettings(temp_dir).load_settings()
        options = BlogOptions.from_mapping(BlogSettings.blog_options(settings))

        assert options.prefix == '/blog'
        assert options.paginate is True
        assert options.custom_collections[0].property == 'category'

    def test_merge_with_args(self, temp_dir):
        loader = BlogSettings(temp_dir)
        loader.load_settings()
        merged = loader.merge_with_args({'per_page': 2, 'prefix': None, 'article': 'New post'})

        assert merged['per_page'] == 2
        assert merged['prefix'] is None
        assert 'article' not in merged

    def test_blog_options_drop_host_settings(self, temp_dir):
        settings = BlogSettings(temp_dir).load_settings()
        options = BlogSettings.blog_options(settings)

        assert 'content' not in options
        assert 'manifest' not in options
        assert options['per_page'] == 10
