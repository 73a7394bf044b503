"""
Source providers: where the pipeline gets its source items from.

A provider exposes ``items()`` and ``subscribe(callback)``. Every notification carries
the complete new list of items; there are no partial updates.
"""

import os
import logging
from typing import Callable, Iterable, List, Tuple

import yaml

from .resources import SourceItem

logger = logging.getLogger('Blogwright.sources')

# Template extensions are not part of a source's logical path ("a.html.md" -> "a.html")
TEMPLATE_EXTENSIONS = ('.md', '.markdown', '.j2', '.jinja', '.jinja2')


def parse_front_matter(content: str, path: str = '<string>'):
    """
    Split a file into YAML front matter and body.

    Returns:
        (metadata, body); metadata is empty when the file has no valid front matter
    """
    if not content.startswith('---'):
        return {}, content

    parts = content.split('---', 2)
    if len(parts) < 3:
        return {}, content

    try:
        metadata = yaml.safe_load(parts[1])
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML front matter in {path}: {e}")
        metadata = {}
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, parts[2].strip()


def logical_path(relative_path: str) -> str:
    """Source path with OS separators turned into slashes and the template extension dropped."""
    path = relative_path.replace(os.sep, '/')
    root, ext = os.path.splitext(path)
    if ext.lower() in TEMPLATE_EXTENSIONS:
        return root
    return path


class SourceList:
    """In-memory provider; ``replace`` swaps the whole list and notifies subscribers."""

    def __init__(self, items: Iterable[SourceItem] = ()):
        self._items: Tuple[SourceItem, ...] = tuple(items)
        self._subscribers: List[Callable] = []

    def items(self) -> Tuple[SourceItem, ...]:
        return self._items

    def subscribe(self, callback: Callable) -> None:
        self._subscribers.append(callback)

    def replace(self, items: Iterable[SourceItem]) -> None:
        self._items = tuple(items)
        for callback in list(self._subscribers):
            callback(self._items)


class FileSourceProvider(SourceList):
    """Reads every file below a content directory. Call ``refresh`` after files change."""

    def __init__(self, content_dir: str):
        if not os.path.isdir(content_dir):
            raise FileNotFoundError(f"Content directory not found: {content_dir}")
        self.content_dir = content_dir
        super().__init__(self.read_items())

    def read_item(self, file_path: str) -> SourceItem:
        relative = os.path.relpath(file_path, self.content_dir)
        path = logical_path(relative)
        if os.path.splitext(file_path)[1].lower() not in TEMPLATE_EXTENSIONS:
            return SourceItem(path=path)

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()
        metadata, body = parse_front_matter(content, relative)
        return SourceItem(path=path, metadata=metadata, body=body)

    def read_items(self) -> List[SourceItem]:
        """Read the content directory, in a stable order."""
        items = []
        for root, dirs, files in os.walk(self.content_dir):
            dirs.sort()
            for filename in sorted(files):
                if filename.startswith('.'):
                    continue
                file_path = os.path.join(root, filename)
                try:
                    items.append(self.read_item(file_path))
                except (IOError, OSError, UnicodeDecodeError) as e:
                    logger.error(f"Failed to read source file {file_path}: {e}")
        return items

    def refresh(self) -> None:
        """Re-read the content directory and notify subscribers."""
        self.replace(self.read_items())
