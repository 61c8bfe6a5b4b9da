"""
Override sources for template variables.

Overrides live in Java-style properties files next to the template:
``<name>.properties`` for the template itself and ``<name>-common.properties``
for values shared between templates.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Iterator, List, Tuple, Union


logger = logging.getLogger(__name__)

_WHITESPACE = ' \t\f'
_SEPARATORS = '=:'
_ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}
_TRAILING_BACKSLASHES = re.compile(r'\\*$')
_UNICODE_ESCAPE = re.compile(r'[0-9a-fA-F]{4}')


def override_paths(template_path: Union[str, Path]) -> List[Path]:
    """Override files for a template, in precedence order."""
    template_path = Path(template_path)
    base = template_path.stem
    return [
        template_path.parent / f"{base}.properties",
        template_path.parent / f"{base}-common.properties",
    ]


def _logical_lines(text: str) -> Iterator[str]:
    """Join continued lines; a line continues when it ends in an odd number of backslashes."""
    pending = None
    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE)
        if pending is None and (not line or line[0] in '#!'):
            continue
        continued = len(_TRAILING_BACKSLASHES.search(line).group()) % 2 == 1
        if continued:
            line = line[:-1]
        pending = line if pending is None else pending + line
        if not continued:
            yield pending
            pending = None
    if pending is not None:
        yield pending


def unescape(text: str) -> str:
    """Decode properties escapes: ``\\t \\n \\r \\f``, ``\\uXXXX`` and ``\\<char>``."""
    if '\\' not in text:
        return text

    chars = []
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1
        if ch != '\\':
            chars.append(ch)
            continue
        if i >= len(text):
            break
        ch = text[i]
        i += 1
        if ch == 'u':
            digits = text[i:i + 4]
            if not _UNICODE_ESCAPE.fullmatch(digits):
                raise ValueError(f"Malformed \\uxxxx encoding in '{text}'")
            chars.append(chr(int(digits, 16)))
            i += 4
        else:
            chars.append(_ESCAPES.get(ch, ch))
    return "".join(chars)


def _split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line at the first unescaped separator."""
    end = 0
    while end < len(line):
        ch = line[end]
        if ch == '\\':
            end += 2
            continue
        if ch in _SEPARATORS or ch in _WHITESPACE:
            break
        end += 1

    key = line[:end]
    rest = line[end:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return unescape(key), unescape(rest)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse properties text into a key/value mapping.

    Follows the Java properties format: ``key=value``, ``key: value`` and
    ``key value`` entries, ``#`` and ``!`` comments, backslash line
    continuations and backslash escapes in keys and values.

    Raises:
        ValueError: On a malformed ``\\uXXXX`` escape
    """
    properties: Dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        properties[key] = value
    return properties


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """Load a properties file; a missing file yields an empty mapping."""
    path = Path(path)
    logger.debug(f"Checking for properties file '{path}'")
    if not path.exists():
        return {}

    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()
    try:
        return parse_properties(text)
    except ValueError as e:
        raise ValueError(f"Cannot read properties file '{path}': {e}") from e
