"""
Tag pages: one listing page per tag.
"""

from typing import Sequence, Tuple

from .index import CollectionIndex
from .options import BlogOptions
from .paths import render, slugify
from .resources import Resource, add_resources, ignore_templates, without_owner


class TagPages:
    kind = 'tag'

    def __init__(self, blog_name: str, options: BlogOptions):
        self.name = f'blog_{blog_name}_tags'
        self.options = options

    @property
    def enabled(self) -> bool:
        return bool(self.options.generate_tag_pages and self.options.tag_template)

    def link(self, tag: str) -> str:
        """Path of the page listing ``tag``."""
        return render(self.options.taglink, {'tag': slugify(tag)}, source=f"tag '{tag}'")

    def manipulate(self, resources: Sequence[Resource], index: CollectionIndex) -> Tuple[Resource, ...]:
        resources = ignore_templates(without_owner(resources, self.name), [self.options.tag_template])
        pages = [
            Resource(
                path=self.link(tag),
                kind=self.kind,
                template_path=self.options.tag_template,
                data={'tag': tag, 'articles': articles},
                paginatable=True,
                owner=self.name,
            )
            for tag, articles in index.by_tag.items()
            if articles
        ]
        return add_resources(resources, pages)
