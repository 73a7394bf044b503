"""
Custom collection pages: one listing page per value of a front-matter property.
"""

from typing import Sequence, Tuple

from .index import CollectionIndex
from .options import BlogOptions, CustomCollection
from .paths import render, slugify
from .resources import Resource, add_resources, ignore_templates, without_owner


class CustomPages:
    """
    Generic collection pages, instantiated once per configured custom collection.

    With ``custom_collections = {'category': {'link': '/categories/{category}.html',
    'template': '/category.html'}}`` every distinct ``category`` gets a page built from
    ``category.html``, and the template itself is not published.
    """

    kind = 'custom'

    def __init__(self, blog_name: str, options: BlogOptions, collection: CustomCollection):
        self.name = f'blog_{blog_name}_{collection.property}'
        self.options = options
        self.collection = collection

    @property
    def enabled(self) -> bool:
        return True

    @property
    def property(self) -> str:
        return self.collection.property

    def link(self, value) -> str:
        """Path of the page listing the articles whose property equals ``value``."""
        return render(self.collection.link, {self.property: slugify(value)},
                      source=f"{self.property} '{value}'")

    def manipulate(self, resources: Sequence[Resource], index: CollectionIndex) -> Tuple[Resource, ...]:
        resources = ignore_templates(without_owner(resources, self.name), [self.collection.template])
        groups = index.by_custom.get(self.property, {})
        pages = [
            Resource(
                path=self.link(value),
                kind=self.kind,
                template_path=self.collection.template,
                data={self.property: value, 'property': self.property, 'articles': articles},
                paginatable=True,
                owner=self.name,
            )
            for value, articles in groups.items()
            if articles
        ]
        return add_resources(resources, pages)
