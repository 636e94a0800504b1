import re
from typing import Optional, Union
from urllib.parse import ParseResult, SplitResult, urljoin, urlsplit, uses_netloc, uses_relative

from ..common.errors import InvalidURLError

# Characters that never appear unescaped in a well-formed URL reference.
_INVALID_CHARS = re.compile(r'[\s<>"{}|\\^`\x00-\x1f\x7f]')

StructuredURL = Union[SplitResult, ParseResult]


def _split(value: str) -> Optional[SplitResult]:
    if _INVALID_CHARS.search(value):
        return None
    try:
        parts = urlsplit(value)
        # Port parsing is lazy in urllib; force it so bad ports fail here.
        parts.port
    except ValueError:
        return None
    return parts


def is_absolute(value: str) -> bool:
    parts = _split(value)
    return parts is not None and bool(parts.scheme) and bool(parts.netloc)


def parse_base_url(value: Union[str, StructuredURL, None]) -> Optional[str]:
    """
    Normalize a base URL given as a string or a structured urllib value.

    Anything that is not an absolute URL yields None instead of raising, so a
    bad base URL simply puts the client into absolute-path mode.
    """
    if value is None:
        return None
    if isinstance(value, (SplitResult, ParseResult)):
        value = value.geturl()
    if not isinstance(value, str) or not value:
        return None
    return value if is_absolute(value) else None


def _join(base: str, path: str) -> str:
    """
    urljoin for any scheme. urllib only resolves schemes it knows about, so an
    unknown base scheme is swapped for https during the join and put back after.
    """
    scheme = urlsplit(base).scheme
    if scheme in uses_relative and scheme in uses_netloc:
        return urljoin(base, path)
    if urlsplit(path).scheme:
        return urljoin(base, path)

    original_scheme = base[:len(scheme)]
    resolved = urljoin("https" + base[len(scheme):], path)
    return original_scheme + resolved[len("https"):]


def resolve(base: Optional[str], path: str) -> str:
    """
    Return the absolute URL for ``path`` relative to ``base``.

    An empty path means the base URL itself, returned exactly as stored (or ""
    when there is no base). Raises InvalidURLError when the path is malformed
    or cannot become absolute.
    """
    if path == "":
        return base or ""

    if _split(path) is None:
        raise InvalidURLError(f"Malformed URL path: {path!r}")

    if base is None:
        if not is_absolute(path):
            raise InvalidURLError(f"Relative path {path!r} given without a base URL")
        return path

    resolved = _join(base, path)
    if not is_absolute(resolved):
        raise InvalidURLError(f"Could not resolve {path!r} against {base!r}")
    return resolved
