"""
Path templates for Blogwright.

A template is a path with ``{token}`` placeholders, e.g. ``/{year}/{month}/{title}.html``.
Tokens can be omitted or repeated, and ``{token?}`` marks a token that may be empty.
"""

import re
import unicodedata
from functools import lru_cache
from typing import Dict, List, Mapping, Optional

from .errors import TokenResolutionError

TOKEN_RE = re.compile(r'\{([A-Za-z_][A-Za-z0-9_]*)(\?)?\}')

# What each token is allowed to look like when matching source paths
TOKEN_PATTERNS = {
    'year': r'\d{4}',
    'month': r'\d{2}',
    'day': r'\d{2}',
}
DEFAULT_TOKEN_PATTERN = r'[^/]+?'


def _fold_accent(char: str) -> str:
    # Only Latin letters lose their marks ("é" -> "e"); "ジ" or "й" stay as they are
    decomposed = unicodedata.normalize('NFKD', char)
    if decomposed[0].isascii():
        return ''.join(c for c in decomposed if not unicodedata.combining(c))
    return char


def slugify(text) -> str:
    """
    Turn free text into a path-safe slug.

    "Hello, World!" -> "hello-world", "Café" -> "cafe", "Привет мир" -> "привет-мир".
    Letters and digits of any script are kept; everything else becomes a separator.
    """
    if text is None:
        return ''
    normalized = unicodedata.normalize('NFKC', str(text)).lower()
    folded = ''.join(_fold_accent(char) for char in normalized)
    return re.sub(r'[\W_]+', '-', folded).strip('-')


def render(template: str, tokens: Mapping[str, object], source: Optional[str] = None) -> str:
    """
    Substitute every placeholder in ``template`` with its value from ``tokens``.

    Args:
        template: Path template
        tokens: Token values; None and empty strings count as missing
        source: Optional description of what is being rendered, for error messages

    Returns:
        The concrete path

    Raises:
        TokenResolutionError: if a required token has no value
    """
    emptied = False

    def substitute(match):
        nonlocal emptied
        name, optional = match.group(1), match.group(2)
        value = tokens.get(name)
        if value is None or value == '':
            if optional:
                emptied = True
                return ''
            raise TokenResolutionError(template, name, source)
        return str(value)

    path = TOKEN_RE.sub(substitute, template)
    if emptied:
        path = re.sub(r'/{2,}', '/', path)
    return path


def join_prefix(prefix: Optional[str], template: str) -> str:
    """
    Mount ``template`` below ``prefix``.

    The result always starts with a slash, keeps a trailing slash if the template had
    one, and never contains doubled separators.
    """
    if not prefix:
        return template
    segments = [prefix.strip('/'), template.lstrip('/')]
    joined = '/' + '/'.join(segment for segment in segments if segment)
    return re.sub(r'/{2,}', '/', joined)


def template_tokens(template: str) -> List[str]:
    """Names of the tokens a template references, in order of first appearance."""
    names = []
    for match in TOKEN_RE.finditer(template):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


@lru_cache(maxsize=64)
def _compile_pattern(template: str):
    parts = []
    seen = set()
    position = 0
    for token in TOKEN_RE.finditer(template):
        parts.append(re.escape(template[position:token.start()]))
        name, optional = token.group(1), token.group(2)
        if name in seen:
            parts.append(f'(?P={name})')
        else:
            seen.add(name)
            pattern = TOKEN_PATTERNS.get(name, DEFAULT_TOKEN_PATTERN)
            parts.append(f'(?P<{name}>{pattern})' + ('?' if optional else ''))
        position = token.end()
    parts.append(re.escape(template[position:]))
    return re.compile(''.join(parts))


def match(template: str, path: str) -> Optional[Dict[str, str]]:
    """
    Match a concrete path against a template.

    Returns:
        The token values captured from ``path``, or None if it does not fit the template
    """
    found = _compile_pattern(template.lstrip('/')).fullmatch(path.lstrip('/'))
    if not found:
        return None
    return {name: value for name, value in found.groupdict().items() if value is not None}
