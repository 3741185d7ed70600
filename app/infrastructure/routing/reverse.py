"""Reverse template parsing and URL path composition.

Reverse templates build (never parse) URLs. They contain literal text,
named placeholders and optional sections:

    /products-list/<name>/<color*>
    /articles[/<page>]

``<name*>`` marks a greedy placeholder whose value may contain slashes.
Optional sections in square brackets are dropped from the end of the
path when every parameter inside them equals its default. Optional
sections without placeholders are always kept.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from urllib.parse import quote, unquote

from infrastructure.localization.exceptions import ReverseTemplateError

_PARAM_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_MULTIPLE_SLASHES_RE = re.compile(r"/{2,}")


@dataclass(frozen=True)
class ReversePart:
    """Literal text, or a placeholder when ``param`` is set."""

    text: str = ""
    param: Optional[str] = None
    greedy: bool = False


@dataclass(frozen=True)
class ReverseSection:
    """Consecutive parts, either always rendered (fixed) or optional."""

    fixed: bool
    parts: Tuple[ReversePart, ...]

    @property
    def param_names(self) -> Tuple[str, ...]:
        return tuple(part.param for part in self.parts if part.param is not None)


@dataclass(frozen=True)
class ReverseTemplate:
    """Parsed reverse template.

    Attributes:
        template: Source template string.
        sections: Ordered literal/optional sections.
        param_names: Placeholder names in order of first appearance.
    """

    template: str
    sections: Tuple[ReverseSection, ...]
    param_names: Tuple[str, ...]


def parse_reverse_template(template: str) -> ReverseTemplate:
    """Parse a reverse template into sections and placeholder names.

    Args:
        template: Reverse template string.

    Returns:
        ReverseTemplate instance.

    Raises:
        ReverseTemplateError: On unbalanced brackets, nested optional
            sections or invalid placeholder names.
    """
    sections: List[ReverseSection] = []
    parts: List[ReversePart] = []
    literal: List[str] = []
    in_optional = False
    index = 0

    def flush_literal():
        if literal:
            parts.append(ReversePart(text="".join(literal)))
            literal.clear()

    def close_section(fixed: bool):
        flush_literal()
        if parts:
            sections.append(ReverseSection(fixed=fixed, parts=tuple(parts)))
            parts.clear()

    while index < len(template):
        char = template[index]
        if char == "<":
            end = template.find(">", index)
            if end == -1:
                raise ReverseTemplateError(
                    f"Unclosed placeholder in reverse template: {template!r}"
                )
            name = template[index + 1 : end]
            greedy = name.endswith("*")
            if greedy:
                name = name[:-1]
            if not _PARAM_NAME_RE.match(name):
                raise ReverseTemplateError(
                    f"Invalid placeholder name {name!r} in reverse template: {template!r}"
                )
            flush_literal()
            parts.append(ReversePart(param=name, greedy=greedy))
            index = end + 1
            continue
        if char == "[":
            if in_optional:
                raise ReverseTemplateError(
                    f"Nested optional section in reverse template: {template!r}"
                )
            close_section(fixed=True)
            in_optional = True
        elif char == "]":
            if not in_optional:
                raise ReverseTemplateError(
                    f"Unbalanced ']' in reverse template: {template!r}"
                )
            close_section(fixed=False)
            in_optional = False
        else:
            literal.append(char)
        index += 1

    if in_optional:
        raise ReverseTemplateError(
            f"Unclosed optional section in reverse template: {template!r}"
        )
    close_section(fixed=True)

    param_names: Dict[str, None] = {}
    for section in sections:
        for name in section.param_names:
            param_names[name] = None
    return ReverseTemplate(
        template=template, sections=tuple(sections), param_names=tuple(param_names)
    )


def _encode_path_value(value: Any) -> str:
    # Slashes stay literal in the path, "%2F" is never emitted
    return quote(str(value), safe="/")


def _equals_default(value: Any, name: str, defaults: Mapping[str, Any]) -> bool:
    default = defaults.get(name)
    if value is None or default is None:
        return value is None or str(value) == ""
    return str(value) == str(default)


def compose_path(
    template: ReverseTemplate,
    params: Dict[str, Any],
    defaults: Mapping[str, Any],
) -> str:
    """Compose a URL path from a parsed reverse template.

    Placeholder values are taken from ``params`` (and removed from it, so the
    remaining params can go to the query string), else from ``defaults``,
    else rendered empty. Trailing optional sections whose every parameter
    equals its default are dropped; a trailing optional section without
    placeholders stops the trimming.

    Args:
        template: Parsed reverse template.
        params: Params to render; consumed entries are removed.
        defaults: Default param values for the route's localization.

    Returns:
        Composed path.
    """
    rendered: List[Tuple[ReverseSection, str, Dict[str, Any]]] = []
    for section in template.sections:
        text: List[str] = []
        values: Dict[str, Any] = {}
        for part in section.parts:
            if part.param is None:
                text.append(part.text)
                continue
            value = params.pop(part.param, None)
            if value is None:
                value = defaults.get(part.param)
            values[part.param] = value
            if value is not None:
                text.append(_encode_path_value(value))
        rendered.append((section, "".join(text), values))

    end = len(rendered)
    while end > 0:
        section, _, values = rendered[end - 1]
        if section.fixed or not values:
            break
        if not all(_equals_default(v, k, defaults) for k, v in values.items()):
            break
        end -= 1

    path = "".join(text for _, text, _ in rendered[:end])
    return _MULTIPLE_SLASHES_RE.sub("/", path)


def _flatten_query(name: str, value: Any) -> Iterator[Tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield from _flatten_query(f"{name}[{key}]", item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten_query(f"{name}[]", item)
    elif isinstance(value, bool):
        yield name, "1" if value else "0"
    else:
        yield name, str(value)


def build_query_string(params: Mapping[str, Any], separator: str = "&") -> str:
    """Build an RFC 3986 query string.

    Lists are written as ``name[]=value``, mappings as ``name[key]=value``
    and None values are skipped. Encoded slashes are turned back into ``/``.

    Args:
        params: Query params.
        separator: Separator between params.

    Returns:
        Query string without the leading ``?``.
    """
    pairs = []
    for name, value in params.items():
        for key, item in _flatten_query(str(name), value):
            pairs.append(f"{quote(key, safe='[]')}={quote(item, safe='')}")
    return separator.join(pairs).replace("%2F", "/")


@lru_cache(maxsize=None)
def _path_regex(template: ReverseTemplate) -> "re.Pattern[str]":
    pattern: List[str] = []
    seen: Dict[str, None] = {}
    for section in template.sections:
        chunk: List[str] = []
        for part in section.parts:
            if part.param is None:
                chunk.append(re.escape(part.text))
            elif part.param in seen:
                chunk.append(f"(?P={part.param})")
            else:
                seen[part.param] = None
                value = ".+" if part.greedy else "[^/]+"
                chunk.append(f"(?P<{part.param}>{value})")
        text = "".join(chunk)
        pattern.append(text if section.fixed else f"(?:{text})?")
    return re.compile("^" + "".join(pattern) + "$")


def match_path(template: ReverseTemplate, path: str) -> Optional[Dict[str, str]]:
    """Match a request path against a parsed reverse template.

    Used to find the route that produced a path, not as a routing engine:
    placeholders match one path segment, greedy placeholders match the rest.

    Args:
        template: Parsed reverse template.
        path: Request path.

    Returns:
        Decoded placeholder values of the match, or None.
    """
    if len(path) > 1:
        path = path.rstrip("/")
    match = _path_regex(template).match(path)
    if match is None:
        return None
    return {
        name: unquote(value) for name, value in match.groupdict().items() if value
    }
