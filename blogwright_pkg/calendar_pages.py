"""
Calendar pages: yearly, monthly and daily archives.
"""

from typing import List, Optional, Sequence, Tuple

from .index import CollectionIndex
from .options import BlogOptions
from .paths import render
from .resources import Resource, add_resources, ignore_templates, without_owner


class CalendarPages:
    """
    Archive pages for every year, month and day that has published articles.

    Each level is generated only when its ``generate_*_pages`` flag is on and it has a
    template (``year_template`` and friends fall back to ``calendar_template``).
    """

    def __init__(self, blog_name: str, options: BlogOptions):
        self.name = f'blog_{blog_name}_calendar'
        self.options = options

    def wants(self, level: str) -> bool:
        return bool(getattr(self.options, f'generate_{level}_pages') and getattr(self.options, f'{level}_template'))

    @property
    def enabled(self) -> bool:
        return any(self.wants(level) for level in ('year', 'month', 'day'))

    def link(self, year: int, month: Optional[int] = None, day: Optional[int] = None) -> str:
        """Path of the archive page for a year, a month or a day."""
        tokens = {'year': f'{year:04d}'}
        template = self.options.year_link
        if month is not None:
            tokens['month'] = f'{month:02d}'
            template = self.options.month_link
            if day is not None:
                tokens['day'] = f'{day:02d}'
                template = self.options.day_link
        return render(template, tokens, source='calendar page')

    def _page(self, level, articles, year, month=None, day=None) -> Resource:
        data = {'year': year}
        if month is not None:
            data['month'] = month
        if day is not None:
            data['day'] = day
        data['articles'] = articles
        return Resource(
            path=self.link(year, month, day),
            kind=level,
            template_path=getattr(self.options, f'{level}_template'),
            data=data,
            paginatable=True,
            owner=self.name,
        )

    def manipulate(self, resources: Sequence[Resource], index: CollectionIndex) -> Tuple[Resource, ...]:
        templates = [self.options.calendar_template, self.options.year_template,
                     self.options.month_template, self.options.day_template]
        resources = ignore_templates(without_owner(resources, self.name), templates)

        pages: List[Resource] = []
        for year, year_node in index.by_calendar.items():
            if self.wants('year'):
                pages.append(self._page('year', year_node.articles, year))
            for month, month_node in year_node.children.items():
                if self.wants('month'):
                    pages.append(self._page('month', month_node.articles, year, month))
                if self.wants('day'):
                    for day, day_node in month_node.children.items():
                        pages.append(self._page('day', day_node.articles, year, month, day))
        return add_resources(resources, pages)
