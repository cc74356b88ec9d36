from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from tqadb.errors import MalformedDataError

DocUri = SplitResult

_ILLEGAL_CHARS = frozenset('"<>\\^`{|}')
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_BRACKETED_HOST_RE = re.compile(r"\[[^\[\]]+\](?::\d*)?")


def _has_illegal_char(text: str) -> bool:
    return any(ch.isspace() or ch in _ILLEGAL_CHARS or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text)


def _has_bracket(text: str) -> bool:
    return "[" in text or "]" in text


def _upper_escapes(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: m.group(0).upper(), text)


def _normalize_netloc(netloc: str) -> str:
    userinfo, sep, hostport = netloc.rpartition("@")
    return userinfo + sep + hostport.lower()


def _check_brackets(text: str, parts: SplitResult) -> None:
    # Brackets only delimit an IP literal host.
    userinfo, _, hostport = parts.netloc.rpartition("@")
    if _has_bracket(userinfo) or (_has_bracket(hostport) and not _BRACKETED_HOST_RE.fullmatch(hostport)):
        raise MalformedDataError(f"Misplaced bracket in URI authority: {text!r}", value=text)
    if _has_bracket(parts.path) or _has_bracket(parts.query) or _has_bracket(parts.fragment):
        raise MalformedDataError(f"Illegal bracket in URI: {text!r}", value=text)


def parse_uri(text: object) -> DocUri:
    """Parse stored URI text, normalizing the parts that compare case-insensitively.

    Scheme and host are lowercased and percent escapes uppercased, so
    ``HTTP://A/%7e`` and ``http://a/%7E`` are the same value.
    """
    if not isinstance(text, str) or not text:
        raise MalformedDataError(f"Expected non-empty URI text, got {text!r}", value=text)
    if _has_illegal_char(text):
        raise MalformedDataError(f"Illegal character in URI: {text!r}", value=text)
    if _BAD_ESCAPE_RE.search(text):
        raise MalformedDataError(f"Malformed percent escape in URI: {text!r}", value=text)

    # Everything before the first ':' counts as the scheme unless a path,
    # query or fragment delimiter comes first.
    head = re.split(r"[/?#]", text, maxsplit=1)[0]
    if ":" in head:
        scheme, rest = text.split(":", 1)
        if not _SCHEME_RE.fullmatch(scheme):
            raise MalformedDataError(f"Invalid scheme in URI: {text!r}", value=text)
        if not rest:
            raise MalformedDataError(f"Missing scheme-specific part in URI: {text!r}", value=text)

    try:
        parts = urlsplit(text)
        _ = parts.port
    except ValueError as exc:
        raise MalformedDataError(f"Invalid URI {text!r}: {exc}", value=text) from exc

    if "#" in parts.fragment:
        raise MalformedDataError(f"More than one fragment delimiter in URI: {text!r}", value=text)
    _check_brackets(text, parts)

    return parts._replace(
        scheme=parts.scheme.lower(),
        netloc=_upper_escapes(_normalize_netloc(parts.netloc)),
        path=_upper_escapes(parts.path),
        query=_upper_escapes(parts.query),
        fragment=_upper_escapes(parts.fragment),
    )


def format_uri(uri: DocUri) -> str:
    return uri.geturl()
