"""Test configuration and fixtures for Blogwright tests."""

import pytest
import tempfile
import shutil
from datetime import datetime, timezone
from pathlib import Path

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from blogwright_pkg.article import Article
from blogwright_pkg.core import Blog
from blogwright_pkg.resources import SourceItem

BUILD_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def now():
    """Fixed build time: 2024-06-01 12:00 UTC."""
    return BUILD_TIME


@pytest.fixture
def make_blog():
    """Create a Blog whose clock is fixed at the build time."""
    def factory(**options):
        return Blog.initialize(options, clock=lambda: BUILD_TIME)
    return factory


@pytest.fixture
def make_article():
    """Create an Article directly, skipping front-matter parsing."""
    def factory(path, when, tags=(), published=True, **properties):
        slug = os.path.splitext(path)[0]
        return Article(
            source_path=path,
            date=when,
            title=slug,
            slug=slug,
            tags=tuple(tags),
            custom_properties=properties,
            published=published,
            language=None,
            permalink=f'/{slug}.html',
        )
    return factory


@pytest.fixture
def scenario_items():
    """Three articles: 2024-01-05 {a}, 2024-01-20 {a, b}, 2024-02-01 {b}, plus a tag template."""
    return [
        SourceItem('2024-01-05-first.html', {'title': 'First', 'tags': ['a']}, 'First body'),
        SourceItem('2024-01-20-second.html', {'title': 'Second', 'tags': ['a', 'b']}, 'Second body'),
        SourceItem('2024-02-01-third.html', {'title': 'Third', 'tags': 'b', 'date': '2024-02-01'}, 'Third body'),
        SourceItem('tag.html', {}, '{{ tag }}'),
        SourceItem('about.html', {'title': 'About'}, 'About this blog'),
    ]


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a mock content directory with two articles, a template and a page."""
    content_dir = Path(temp_dir) / 'content'
    content_dir.mkdir()

    (content_dir / '2024-01-05-hello-world.html.md').write_text("""---
title: Hello World
tags: [python, web]
category: Tech
---

Hello there. READMORE The rest of the article.
""")

    (content_dir / '2024-02-10-second-post.html.md').write_text("""---
title: Second Post
date: 2024-02-10 08:30:00
tags: python
---

Another article.
""")

    (content_dir / 'tag.html.j2').write_text("<h1>{{ tag }}</h1>\n")
    (content_dir / 'about.html.md').write_text("""---
title: About
---

About page.
""")
    (content_dir / 'images').mkdir()
    (content_dir / 'images' / 'logo.png').write_bytes(b'\x89PNG\r\n\x1a\n')

    return str(content_dir)
