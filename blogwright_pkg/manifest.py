"""
JSON manifest of a resource list, for the render system and for inspection.
"""

from datetime import date, datetime
from typing import Any, Dict, List

from .article import Article
from .core import BlogSnapshot
from .resources import PageSlice, Resource


def article_summary(article: Article) -> Dict[str, Any]:
    return {
        'title': article.title,
        'permalink': article.permalink,
        'date': article.date.isoformat(),
        'tags': list(article.tags),
        'source': article.source_path,
    }


def serialize(value):
    """Turn resource data into JSON-compatible values; articles are listed by permalink."""
    if isinstance(value, Article):
        return value.permalink
    if isinstance(value, PageSlice):
        return {
            'page_number': value.page_number,
            'total_pages': value.total_pages,
            'per_page': value.per_page,
            'prev_path': value.prev_path,
            'next_path': value.next_path,
            'items': [serialize(item) for item in value.items],
        }
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if hasattr(value, 'items'):
        return {str(key): serialize(item) for key, item in value.items()}
    return value


def resource_entry(resource: Resource) -> Dict[str, Any]:
    data = dict(resource.data)
    article = data.pop('article', None)
    entry = {
        'path': resource.path,
        'kind': resource.kind,
        'source': resource.source_path,
        'template': resource.template_path,
        'ignored': resource.ignored,
        'data': serialize(data),
    }
    if article is not None:
        entry['article'] = article_summary(article)
    return entry


def build_manifest(snapshot: BlogSnapshot) -> Dict[str, Any]:
    resources: List[Dict[str, Any]] = [resource_entry(resource) for resource in snapshot.resources]
    return {
        'built_at': snapshot.built_at.isoformat() if snapshot.built_at else None,
        'articles': [article_summary(article) for article in snapshot.index.articles],
        'tags': {tag: [a.permalink for a in articles] for tag, articles in snapshot.index.by_tag.items()},
        'resources': resources,
    }
