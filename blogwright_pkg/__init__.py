"""
Blogwright - blog pages for static sites.

Blogwright takes dated, tagged articles with YAML front matter and works out every
page a blog needs: article permalinks, tag pages, yearly/monthly/daily archives,
custom collections and paginated listings. Rendering is left to the host.
"""

__version__ = "1.0.0"

from .core import Blog, BlogSnapshot
from .errors import (BlogError, InvalidConfiguration, MissingRequiredField,
                     PathCollisionError, TokenResolutionError)
from .options import BlogOptions
from .resources import PageSlice, Resource, SourceItem
from .sources import FileSourceProvider, SourceList

__all__ = [
    'Blog', 'BlogSnapshot', 'BlogOptions', 'Resource', 'SourceItem', 'PageSlice',
    'SourceList', 'FileSourceProvider', 'BlogError', 'InvalidConfiguration',
    'MissingRequiredField', 'PathCollisionError', 'TokenResolutionError',
]
