"""
Pagination of listing pages.
"""

import logging
import math
from typing import List, Sequence, Tuple

from .index import CollectionIndex
from .options import BlogOptions
from .paths import render
from .resources import PageSlice, Resource, add_resources, without_owner

logger = logging.getLogger('Blogwright.paginator')


class Paginator:
    """
    Split listing pages into pages of ``per_page`` articles.

    Listings are the tag, calendar and custom collection pages, plus any source page
    whose front matter sets ``pageable: true`` (backed by every published article).
    Page 1 keeps the listing's path; page N lives at ``path + '/' + page_link``.
    """

    kind = 'page'

    def __init__(self, blog_name: str, options: BlogOptions):
        self.name = f'blog_{blog_name}_paginate'
        self.options = options

    @property
    def enabled(self) -> bool:
        return self.options.paginate

    def page_path(self, path: str, number: int) -> str:
        """Path of page ``number`` of the listing at ``path``."""
        if number == 1:
            return path
        suffix = render(self.options.page_link, {'num': number}, source=f"page {number} of {path}")
        return path.rstrip('/') + '/' + suffix.lstrip('/')

    def is_listing(self, resource: Resource) -> bool:
        if resource.ignored:
            return False
        return resource.paginatable or (not resource.synthetic and resource.metadata.get('pageable') is True)

    def per_page(self, resource: Resource) -> int:
        per_page = resource.metadata.get('per_page')
        if per_page is None:
            return self.options.per_page
        if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page < 1:
            logger.warning(f"Ignoring per_page {per_page!r} in {resource.source_path}, using {self.options.per_page}")
            return self.options.per_page
        return per_page

    def paginate(self, resource: Resource, articles: Sequence, per_page: int) -> List[Resource]:
        """
        Build the pages of one listing; the first entry is the listing itself.

        An empty listing still has its first page.
        """
        total_pages = max(1, math.ceil(len(articles) / per_page))
        paths = [self.page_path(resource.path, number) for number in range(1, total_pages + 1)]

        pages = []
        for number in range(1, total_pages + 1):
            items = tuple(articles[(number - 1) * per_page:number * per_page])
            page = PageSlice(
                page_number=number,
                items=items,
                total_pages=total_pages,
                per_page=per_page,
                prev_path=paths[number - 2] if number > 1 else None,
                next_path=paths[number] if number < total_pages else None,
            )
            data = dict(resource.data, pagination=page, page_articles=items)
            if number == 1:
                pages.append(resource.evolve(data=data))
            else:
                pages.append(Resource(
                    path=paths[number - 1],
                    kind=self.kind,
                    template_path=resource.template_path,
                    data=data,
                    metadata=resource.metadata,
                    body=resource.body,
                    owner=self.name,
                ))
        return pages

    def manipulate(self, resources: Sequence[Resource], index: CollectionIndex) -> Tuple[Resource, ...]:
        if not self.enabled:
            return tuple(resources)

        result = []
        extra_pages = []
        for resource in without_owner(resources, self.name):
            if not self.is_listing(resource):
                result.append(resource)
                continue
            articles = resource.articles if resource.paginatable else index.articles
            first, *rest = self.paginate(resource, articles, self.per_page(resource))
            result.append(first)
            extra_pages.extend(rest)
        return add_resources(result, extra_pages)
