"""Reading and writing recipe files.

A recipe file holds a single s-expression of the form::

    (name :fetcher github :repo "owner/name" :files ("*.el" (:exclude "test.el")))

Only the subset of the syntax used by recipes is supported: symbols,
keywords, double-quoted strings and proper lists.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List, Sequence

from .models import FetcherSpec, HostedFetcher, RecipeRecord, UrlFetcher

HOSTED_FETCHERS = ("github", "gitlab")
URL_FETCHER = "git"
NIL = "nil"
MAX_FILE_SPEC_DEPTH = 32

_FILE_SPEC_KEYWORDS = {":defaults", ":exclude"}

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+|;[^\n]*)
    |(?P<open>\()
    |(?P<close>\))
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<atom>[^\s()";]+)
    """,
    re.VERBOSE | re.DOTALL,
)
_SYMBOL_RE = re.compile(r"""^[^\s()";'`,]+$""")


class RecipeParseError(ValueError):
    """Raised when recipe text cannot be read as a recipe record."""


class Symbol(str):
    """Bare symbol or keyword read from a recipe."""

    __slots__ = ()

    @property
    def is_keyword(self) -> bool:
        return self.startswith(":")


def dumps_recipe(record: RecipeRecord) -> str:
    """Serialize ``record`` as a single recipe literal followed by a newline."""
    if not _SYMBOL_RE.match(record.name) or record.name.startswith(":"):
        raise ValueError(f"Invalid recipe name: {record.name!r}")

    parts: List[str] = [record.name]
    fetcher = record.fetcher
    if isinstance(fetcher, HostedFetcher):
        parts.extend([":fetcher", fetcher.service, ":repo", _quote(fetcher.repo)])
    elif isinstance(fetcher, UrlFetcher):
        parts.extend([":fetcher", URL_FETCHER, ":url", _quote(fetcher.url)])
    else:
        raise TypeError(f"Unsupported fetcher: {fetcher!r}")

    if record.files is not None:
        parts.extend([":files", _dump_file_spec(record.files)])
    return "(" + " ".join(parts) + ")\n"


def loads_recipe(text: str) -> RecipeRecord:
    """Parse recipe ``text`` into a :class:`RecipeRecord`."""
    form = read_form(text)
    if not isinstance(form, list) or not form:
        raise RecipeParseError("Recipe must be a non-empty list")

    name = form[0]
    if not isinstance(name, Symbol) or name.is_keyword:
        raise RecipeParseError("Recipe must start with the package name")

    plist = _as_plist(form[1:])
    fetcher = _fetcher_from_plist(plist)
    files = plist.get(":files")
    if (isinstance(files, Symbol) and files == NIL) or files == []:
        files = None
    if files is not None:
        if not isinstance(files, list):
            raise RecipeParseError(":files must be a list")
        files = _load_file_spec(files)
    return RecipeRecord(name=str(name), fetcher=fetcher, files=files)


def read_form(text: str) -> Any:
    """Read exactly one s-expression from ``text``.

    Lists are built on an explicit stack, so nesting depth is not limited by
    the interpreter.
    """
    stack: List[List[Any]] = []
    form: Any = None
    complete = False
    for kind, value in _tokenize(text):
        if complete:
            raise RecipeParseError(f"Unexpected trailing content: {value!r}")
        if kind == "open":
            stack.append([])
            continue
        if kind == "close":
            if not stack:
                raise RecipeParseError("Unbalanced closing parenthesis")
            item: Any = stack.pop()
        else:
            item = _atom(kind, value)
        if stack:
            stack[-1].append(item)
        else:
            form = item
            complete = True

    if stack:
        raise RecipeParseError("Unterminated list")
    if not complete:
        raise RecipeParseError("Unexpected end of recipe")
    return form


# ----------------------------------------------------------------------
# Reader


def _tokenize(text: str) -> Iterator[tuple[str, str]]:
    position = 0
    while position < len(text):
        match = _TOKEN_RE.match(text, position)
        if match is None:
            raise RecipeParseError(f"Unreadable input at offset {position}")
        position = match.end()
        kind = match.lastgroup or ""
        if kind == "space":
            continue
        yield kind, match.group()


def _atom(kind: str, value: str) -> Any:
    if kind == "string":
        return _unquote(value)
    if value == ".":
        raise RecipeParseError("Dotted pairs are not supported")
    return Symbol(value)


def _unquote(token: str) -> str:
    body = token[1:-1]
    return re.sub(r"\\(.)", lambda match: match.group(1), body, flags=re.DOTALL)


def _as_plist(items: Sequence[Any]) -> Dict[str, Any]:
    if len(items) % 2:
        raise RecipeParseError("Recipe properties must come in key/value pairs")
    plist: Dict[str, Any] = {}
    for index in range(0, len(items), 2):
        key = items[index]
        if not isinstance(key, Symbol) or not key.is_keyword:
            raise RecipeParseError(f"Expected a keyword, got {key!r}")
        plist[str(key)] = items[index + 1]
    return plist


def _fetcher_from_plist(plist: Dict[str, Any]) -> FetcherSpec:
    fetcher = plist.get(":fetcher")
    if not isinstance(fetcher, Symbol):
        raise RecipeParseError("Recipe has no :fetcher")
    if fetcher in HOSTED_FETCHERS:
        repo = plist.get(":repo")
        if not isinstance(repo, str) or isinstance(repo, Symbol) or not repo:
            raise RecipeParseError(f":fetcher {fetcher} requires a :repo string")
        return HostedFetcher(service=str(fetcher), repo=repo)
    if fetcher == URL_FETCHER:
        url = plist.get(":url")
        if not isinstance(url, str) or isinstance(url, Symbol) or not url:
            raise RecipeParseError(":fetcher git requires a :url string")
        return UrlFetcher(url=url)
    raise RecipeParseError(f"Unsupported fetcher: {fetcher}")


def _load_file_spec(items: List[Any], depth: int = 1) -> List[Any]:
    if depth > MAX_FILE_SPEC_DEPTH:
        raise RecipeParseError(f":files nests deeper than {MAX_FILE_SPEC_DEPTH} levels")
    spec: List[Any] = []
    for item in items:
        if isinstance(item, list):
            spec.append(_load_file_spec(item, depth + 1))
        else:
            spec.append(str(item))
    return spec


# ----------------------------------------------------------------------
# Writer


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _dump_file_spec(spec: Sequence[Any]) -> str:
    parts: List[str] = []
    for entry in spec:
        if isinstance(entry, str):
            parts.append(entry if entry in _FILE_SPEC_KEYWORDS else _quote(entry))
        else:
            parts.append(_dump_file_spec(entry))
    return "(" + " ".join(parts) + ")"


__all__ = [
    "HOSTED_FETCHERS",
    "RecipeParseError",
    "URL_FETCHER",
    "dumps_recipe",
    "loads_recipe",
    "read_form",
]
