"""
Collection index: articles grouped by tag, calendar period and custom property.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .article import Article


@dataclass(frozen=True)
class CalendarNode:
    """Articles of one year, month or day, with the finer periods below it."""
    articles: Tuple[Article, ...]
    children: Mapping[int, 'CalendarNode'] = field(default_factory=dict)


@dataclass(frozen=True)
class CollectionIndex:
    articles: Tuple[Article, ...] = ()
    by_tag: Mapping[str, Tuple[Article, ...]] = field(default_factory=dict)
    by_calendar: Mapping[int, CalendarNode] = field(default_factory=dict)
    by_custom: Mapping[str, Mapping[str, Tuple[Article, ...]]] = field(default_factory=dict)

    def calendar_articles(self, year: int, month: int = None, day: int = None) -> Tuple[Article, ...]:
        """Articles of a year, month or day; empty when nothing was published then."""
        node = self.by_calendar.get(year)
        for part in (month, day):
            if node is None or part is None:
                break
            node = node.children.get(part)
        return node.articles if node else ()


def sort_articles(articles: Iterable[Article]) -> Tuple[Article, ...]:
    """Newest first; articles sharing a date are ordered by source path."""
    by_path = sorted(articles, key=lambda article: article.source_path)
    return tuple(sorted(by_path, key=lambda article: article.date, reverse=True))


def _property_values(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        values = [str(item).strip() for item in value]
    else:
        values = [str(value).strip()]
    return [item for item in dict.fromkeys(values) if item]


def build_index(articles: Iterable[Article], custom_properties: Sequence[str] = ()) -> CollectionIndex:
    """
    Group the published articles.

    Args:
        articles: Every article of the blog; unpublished ones are left out
        custom_properties: Front-matter properties to group on, in declaration order

    Returns:
        A new CollectionIndex
    """
    ordered = sort_articles(article for article in articles if article.published)

    by_tag: Dict[str, List[Article]] = {}
    calendar: Dict[int, Dict[int, Dict[int, List[Article]]]] = {}
    by_custom: Dict[str, Dict[str, List[Article]]] = {prop: {} for prop in custom_properties}

    # Appending in order keeps every group sorted
    for article in ordered:
        for tag in article.tags:
            by_tag.setdefault(tag, []).append(article)

        day = article.date
        calendar.setdefault(day.year, {}).setdefault(day.month, {}).setdefault(day.day, []).append(article)

        for prop, groups in by_custom.items():
            for value in _property_values(article.custom_properties.get(prop)):
                groups.setdefault(value, []).append(article)

    by_calendar = {}
    for year, months in sorted(calendar.items()):
        month_nodes = {}
        for month, days in sorted(months.items()):
            day_nodes = {number: CalendarNode(tuple(items)) for number, items in sorted(days.items())}
            month_nodes[month] = CalendarNode(sort_articles(a for node in day_nodes.values() for a in node.articles),
                                              day_nodes)
        by_calendar[year] = CalendarNode(sort_articles(a for node in month_nodes.values() for a in node.articles),
                                         month_nodes)

    return CollectionIndex(
        articles=ordered,
        by_tag={tag: tuple(items) for tag, items in sorted(by_tag.items())},
        by_calendar=by_calendar,
        by_custom={prop: {value: tuple(items) for value, items in sorted(groups.items())}
                   for prop, groups in by_custom.items()},
    )
