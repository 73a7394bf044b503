import os
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .article import Article, build_article
from .articles import ArticlePages
from .calendar_pages import CalendarPages
from .custom_pages import CustomPages
from .errors import BlogError, InvalidConfiguration, MissingRequiredField, PathCollisionError
from .index import CollectionIndex, build_index
from .options import BlogOptions
from .paginator import Paginator
from .paths import match
from .resources import Resource, SourceItem, ignore_templates
from .tag_pages import TagPages


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno > logging.INFO:
            return True
        allowed_messages = [
            "== Blog Sources:",
            "Rebuilt blog",
            "Wrote manifest",
            "Created article",
            "Build completed in",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(logs_dir='logs', level=logging.INFO):
    """
    Set up the 'Blogwright' logger: filtered console output, full DEBUG log file.

    Args:
        logs_dir: Directory for log files; None disables the file handler
        level: Console level
    """
    logger = logging.getLogger('Blogwright')
    logger.setLevel(logging.DEBUG)

    if not logger.handlers:
        # Console handler with filter
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        # File handler for all logs
        if logs_dir:
            os.makedirs(logs_dir, exist_ok=True)
            log_filename = datetime.now().strftime('blogwright_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(logs_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(file_handler)

    return logger


@dataclass(frozen=True)
class BlogSnapshot:
    """The result of one rebuild. A rebuild publishes a new snapshot and never touches an old one."""
    articles: Tuple[Article, ...] = ()
    index: CollectionIndex = field(default_factory=CollectionIndex)
    resources: Tuple[Resource, ...] = ()
    built_at: Optional[datetime] = None

    @property
    def published_resources(self) -> Tuple[Resource, ...]:
        return tuple(resource for resource in self.resources if not resource.ignored)

    @property
    def synthetic_resources(self) -> Tuple[Resource, ...]:
        return tuple(resource for resource in self.resources if resource.synthetic)

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(self.index.by_tag)

    def find(self, path: str) -> Optional[Resource]:
        """Published resource at ``path``, if any."""
        path = path.lstrip('/')
        for resource in self.published_resources:
            if resource.path.lstrip('/') == path:
                return resource
        return None


class Blog:
    """
    Blog pipeline coordinator.

    Turns the host's source items into articles, indexes them and runs the resource
    list manipulators in a fixed order: articles, tags, calendar, custom collections
    (in declaration order), pagination.
    """

    def __init__(self, options=None, clock: Optional[Callable[[], datetime]] = None):
        if not isinstance(options, BlogOptions):
            options = BlogOptions.from_mapping(options)
        self.options = options
        self.name = options.name
        self.clock = clock or (lambda: datetime.now(self.options.tz))
        self.logger = logging.getLogger('Blogwright')

        self.tag_pages = TagPages(self.name, options)
        self.calendar_pages = CalendarPages(self.name, options)
        self.custom_pages = {
            collection.property: CustomPages(self.name, options, collection)
            for collection in options.custom_collections
        }
        self.paginator = Paginator(self.name, options)

        self.snapshot = BlogSnapshot()
        self.provider = None

        self.logger.info(f"== Blog Sources: {options.sources} (prefix + sources)")

    @classmethod
    def initialize(cls, config=None, **kwargs) -> 'Blog':
        """Validate ``config`` and create a Blog from it."""
        return cls(BlogOptions.from_mapping(config), **kwargs)

    def attach(self, provider) -> BlogSnapshot:
        """
        Follow a source provider: rebuild now and whenever it reports a change.

        The provider needs ``items()`` returning the current source items and
        ``subscribe(callback)``; the callback receives the new items.
        """
        self.provider = provider
        provider.subscribe(self.rebuild)
        return self.rebuild(provider.items())

    def is_article_source(self, item: SourceItem) -> bool:
        return match(self.options.sources, item.path) is not None

    def build_articles(self, items: Iterable[SourceItem], now: datetime) -> Tuple[Article, ...]:
        """
        Build an article for every source matching the sources pattern.

        Articles without a date are logged and left out.

        Raises:
            PathCollisionError: if two articles share a permalink
            TokenResolutionError: if a permalink cannot be rendered
        """
        articles: List[Article] = []
        for item in items:
            if not self.is_article_source(item):
                continue
            try:
                articles.append(build_article(item, self.options, now))
            except MissingRequiredField as e:
                self.logger.warning(f"Skipping article: {e}")

        permalinks: Dict[str, Article] = {}
        for article in sorted(articles, key=lambda a: a.source_path):
            key = article.permalink.lstrip('/')
            if key in permalinks:
                raise PathCollisionError(article.permalink, f"article {permalinks[key].source_path}",
                                         f"article {article.source_path}")
            permalinks[key] = article
        return tuple(articles)

    def manipulators(self, articles: Iterable[Article] = None) -> list:
        """The enabled manipulators in the order they run."""
        if articles is None:
            articles = self.snapshot.articles
        chain = [ArticlePages(self.name, {article.source_path: article for article in articles})]
        chain.append(self.tag_pages)
        chain.append(self.calendar_pages)
        chain.extend(self.custom_pages.values())
        chain.append(self.paginator)
        return [manipulator for manipulator in chain if manipulator.enabled]

    def manipulate(self, resources: Iterable[Resource], index: CollectionIndex = None,
                   articles: Iterable[Article] = None) -> Tuple[Resource, ...]:
        """
        Run every enabled manipulator over a resource list.

        Defaults to the current snapshot's articles and index, so applying it to the
        snapshot's own resources returns the same list.
        """
        index = index if index is not None else self.snapshot.index
        # Templates are never published at their own path, even when their pages are turned off
        resources = ignore_templates(resources, self.options.template_paths)
        for manipulator in self.manipulators(articles):
            resources = manipulator.manipulate(resources, index)
            self.logger.debug(f"{manipulator.name}: {len(resources)} resources")
        return resources

    def rebuild(self, items: Iterable[SourceItem]) -> BlogSnapshot:
        """
        Rebuild everything from the full current list of source items.

        On error the previous snapshot stays current and the error is raised.
        """
        items = tuple(items)
        now = self.clock()
        try:
            articles = self.build_articles(items, now)
            index = build_index(articles, [collection.property for collection in self.options.custom_collections])
            resources = self.manipulate((Resource.from_source(item) for item in items), index, articles)
        except BlogError as e:
            self.logger.error(f"Rebuild of blog '{self.name}' failed: {e}")
            raise

        self.snapshot = BlogSnapshot(articles=articles, index=index, resources=resources, built_at=now)
        generated = len(self.snapshot.synthetic_resources)
        self.logger.info(f"Rebuilt blog '{self.name}': {len(index.articles)} published articles, "
                         f"{generated} generated pages")
        return self.snapshot

    # Path helpers for templates

    @property
    def articles(self) -> Tuple[Article, ...]:
        """Published articles, newest first."""
        return self.snapshot.index.articles

    @property
    def tags(self):
        return self.snapshot.index.by_tag

    def tag_path(self, tag: str) -> str:
        return self.tag_pages.link(tag)

    def calendar_path(self, year: int, month: int = None, day: int = None) -> str:
        return self.calendar_pages.link(year, month, day)

    def custom_path(self, prop: str, value) -> str:
        if prop not in self.custom_pages:
            raise InvalidConfiguration(prop, "no such custom collection")
        return self.custom_pages[prop].link(value)

    def page_path(self, path: str, number: int) -> str:
        return self.paginator.page_path(path, number)
