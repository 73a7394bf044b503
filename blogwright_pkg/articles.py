"""
Article step: moves every article source to its permalink.
"""

from typing import Mapping, Sequence, Tuple

from .article import Article
from .index import CollectionIndex
from .resources import Resource, path_index


class ArticlePages:
    """
    Publish each article at its permalink.

    Unpublished articles stay in the list but are flagged ignored. Sources that did not
    produce an article (no date, not matching the sources pattern) are left alone.
    """

    kind = 'article'

    def __init__(self, blog_name: str, articles: Mapping[str, Article]):
        self.name = f'blog_{blog_name}_articles'
        self.articles = articles

    @property
    def enabled(self) -> bool:
        return True

    def manipulate(self, resources: Sequence[Resource], index: CollectionIndex) -> Tuple[Resource, ...]:
        result = []
        for resource in resources:
            article = None if resource.synthetic else self.articles.get(resource.source_path)
            if article is None:
                result.append(resource)
                continue
            result.append(resource.evolve(
                path=article.permalink,
                kind=self.kind,
                template_path=article.layout,
                data={'article': article},
                ignored=not article.published,
            ))
        path_index(result)
        return tuple(result)
