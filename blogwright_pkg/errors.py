"""
Exceptions raised by the Blogwright pipeline.
"""


class BlogError(Exception):
    """Base exception for all Blogwright errors."""


class MissingRequiredField(BlogError):
    """An article lacks a field it cannot be archived without (usually its date)."""

    def __init__(self, source_path, field):
        self.source_path = source_path
        self.field = field
        super().__init__(f"Article {source_path} is missing required field '{field}'")


class TokenResolutionError(BlogError):
    """A path template references a token that has no value."""

    def __init__(self, template, token, source=None):
        self.template = template
        self.token = token
        self.source = source
        message = f"Cannot resolve token '{{{token}}}' in template '{template}'"
        if source:
            message += f" for {source}"
        super().__init__(message)


class PathCollisionError(BlogError):
    """Two resources resolve to the same output path."""

    def __init__(self, path, first, second):
        self.path = path
        self.first = first
        self.second = second
        super().__init__(f"Output path '{path}' is produced by both {first} and {second}")


class InvalidConfiguration(BlogError):
    """A configuration option is malformed."""

    def __init__(self, option, message):
        self.option = option
        super().__init__(f"Invalid value for '{option}': {message}")
