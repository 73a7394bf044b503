"""
Resource list types shared by the pipeline.

The host supplies SourceItems; the pipeline turns them into Resources and every
manipulator returns a new tuple of Resources built from the previous one.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .errors import PathCollisionError

EMPTY = MappingProxyType({})


def _freeze(mapping) -> Mapping[str, Any]:
    if mapping is None:
        return EMPTY
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class SourceItem:
    """One raw source file as supplied by the host: logical path, front matter and body."""
    path: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    body: str = ''

    def __post_init__(self):
        object.__setattr__(self, 'metadata', _freeze(self.metadata))


@dataclass(frozen=True)
class PageSlice:
    """One page of a paginated listing."""
    page_number: int
    items: Tuple[Any, ...]
    total_pages: int
    per_page: int
    prev_path: Optional[str] = None
    next_path: Optional[str] = None


@dataclass(frozen=True)
class Resource:
    """
    An entry of the resource list.

    Source-backed resources keep the path of the file they came from in ``source_path``;
    synthetic resources have no source and name the manipulator that made them in
    ``owner``.
    """
    path: str
    kind: str = 'source'
    source_path: Optional[str] = None
    template_path: Optional[str] = None
    data: Mapping[str, Any] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    body: str = ''
    ignored: bool = False
    paginatable: bool = False
    owner: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'data', _freeze(self.data))
        object.__setattr__(self, 'metadata', _freeze(self.metadata))

    @property
    def synthetic(self) -> bool:
        return self.source_path is None

    @property
    def articles(self) -> Tuple[Any, ...]:
        """Articles backing this resource when it is a listing."""
        return tuple(self.data.get('articles', ()))

    def describe(self) -> str:
        if self.synthetic:
            return f"{self.kind} page generated by {self.owner}"
        return f"source {self.source_path}"

    def evolve(self, **changes) -> 'Resource':
        return replace(self, **changes)

    @classmethod
    def from_source(cls, item: SourceItem) -> 'Resource':
        return cls(path=item.path, source_path=item.path, metadata=item.metadata, body=item.body)


def normalize_path(path: str) -> str:
    """Paths compare without their leading slash."""
    return path.lstrip('/')


def path_index(resources: Iterable[Resource]) -> Dict[str, Resource]:
    """
    Map output paths to the resources producing them.

    Raises:
        PathCollisionError: if two published resources share a path
    """
    taken: Dict[str, Resource] = {}
    for resource in resources:
        if resource.ignored:
            continue
        key = normalize_path(resource.path)
        if key in taken:
            raise PathCollisionError(resource.path, taken[key].describe(), resource.describe())
        taken[key] = resource
    return taken


def add_resources(resources: Sequence[Resource], added: Iterable[Resource]) -> Tuple[Resource, ...]:
    """
    Append synthetic resources to a list, failing fast on any path clash.

    Raises:
        PathCollisionError: naming both sides of the first clash
    """
    taken = path_index(resources)
    result = list(resources)
    for resource in added:
        key = normalize_path(resource.path)
        if not resource.ignored and key in taken:
            raise PathCollisionError(resource.path, taken[key].describe(), resource.describe())
        if not resource.ignored:
            taken[key] = resource
        result.append(resource)
    return tuple(result)


def without_owner(resources: Iterable[Resource], owner: str) -> Tuple[Resource, ...]:
    """Drop the synthetic resources a manipulator generated on an earlier pass."""
    return tuple(resource for resource in resources if resource.owner != owner)


def ignore_templates(resources: Iterable[Resource], templates: Iterable[str]) -> Tuple[Resource, ...]:
    """Flag the source files of page templates so they are not published at their own path."""
    templates = {normalize_path(template) for template in templates if template}
    if not templates:
        return tuple(resources)
    return tuple(
        resource.evolve(ignored=True)
        if not resource.synthetic and normalize_path(resource.source_path) in templates
        else resource
        for resource in resources
    )
