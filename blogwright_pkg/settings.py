#!/usr/bin/env python3
"""
Settings loader for Blogwright.
Supports configuration from blogwright.yml, blogwright.yaml or blogwright.json files.
"""

import os
import json
import logging
import yaml
from typing import Dict, Any, Optional

from .errors import InvalidConfiguration
from .options import DEFAULT_OPTIONS

logger = logging.getLogger('Blogwright.settings')


class BlogSettings:
    """Load and manage Blogwright configuration settings."""

    # Host settings; blog options (see options.DEFAULT_OPTIONS) are merged in below
    DEFAULT_SETTINGS = {
        'content': 'content',
        'output': 'output',
        'manifest': 'manifest.json',
        'logs': 'logs',
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['blogwright.yml', 'blogwright.yaml', 'blogwright.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = {**self.DEFAULT_SETTINGS, **DEFAULT_OPTIONS}
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings

        Raises:
            InvalidConfiguration: if the file cannot be read or parsed
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if loaded_settings:
                if not isinstance(loaded_settings, dict):
                    raise InvalidConfiguration(os.path.basename(config_file), "expected a mapping of settings")
                for key in sorted(set(loaded_settings) - set(self.settings)):
                    logger.warning(f"Ignoring unknown setting '{key}' in {os.path.basename(config_file)}")
                # Merge with defaults, giving preference to loaded settings
                self.settings.update({key: value for key, value in loaded_settings.items()
                                      if key in self.settings})
                logger.debug(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        name = os.path.basename(config_path)
        try:
            file_ext = os.path.splitext(config_path)[1].lower()

            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    return json.load(f) or {}
                else:
                    raise InvalidConfiguration(name, f"unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise InvalidConfiguration(name, f"invalid YAML: {e}")
        except json.JSONDecodeError as e:
            raise InvalidConfiguration(name, f"invalid JSON: {e}")
        except (IOError, OSError) as e:
            raise InvalidConfiguration(name, f"error reading configuration file: {e}")

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        sample_config = {
            'content': 'content',
            'output': 'output',
            'prefix': 'blog',
            'permalink': '/{year}/{month}/{title}.html',
            'sources': '{year}-{month}-{day}-{title}.html',
            'taglink': 'tags/{tag}.html',
            'tag_template': 'tag.html',
            'calendar_template': 'calendar.html',
            'paginate': True,
            'per_page': 10,
            'time_zone': 'UTC',
            'custom_collections': {
                'category': {'link': 'categories/{category}.html', 'template': 'category.html'},
            },
        }

        filename = f'blogwright.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# Blogwright Configuration File\n")
                    f.write("# Paths are relative to the blog prefix when one is set\n\n")
                    yaml.safe_dump(sample_config, f, default_flow_style=False, sort_keys=False)
                elif file_format == 'json':
                    json.dump(sample_config, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None and key in merged:
                merged[key] = value

        return merged

    @staticmethod
    def blog_options(settings: Dict[str, Any]) -> Dict[str, Any]:
        """The subset of ``settings`` that configures the blog pipeline."""
        return {key: value for key, value in settings.items() if key in DEFAULT_OPTIONS}
