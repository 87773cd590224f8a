# src/fetcher/utils/url_utils.py
from enum import Enum
from typing import Iterable, Optional

from rewriter.constants import UPSTREAM_HOST, UPSTREAM_ORIGIN


class UrlKind(str, Enum):
    """Tagged outcome of classifying a raw href/src value against the upstream origin."""
    EMPTY = "empty"
    ORIGIN_ABSOLUTE = "origin_absolute"
    ORIGIN_PROTOCOL_RELATIVE = "origin_protocol_relative"
    PROTOCOL_RELATIVE = "protocol_relative"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class UrlUtils:
    """A collection of static methods for classifying and rewriting upstream URLs."""

    ORIGIN_PREFIXES = (f"https://{UPSTREAM_HOST}", f"http://{UPSTREAM_HOST}")
    PROTOCOL_RELATIVE_ORIGIN = f"//{UPSTREAM_HOST}"

    @staticmethod
    def _is_host_boundary(remainder: str) -> bool:
        """
        True when the text after the host ends the authority part.
        Rejects look-alikes such as 'buzerant.com.evil.net' or an explicit port.
        """
        return not remainder or remainder[0] in "/?#"

    @staticmethod
    def classify(url: Optional[str]) -> UrlKind:
        """
        Classifies a URL with plain prefix checks, the same way the rewrite rules do.
        Anything not starting with 'http' or '//' counts as relative.
        """
        if not url:
            return UrlKind.EMPTY

        for prefix in UrlUtils.ORIGIN_PREFIXES:
            if url.startswith(prefix) and UrlUtils._is_host_boundary(url[len(prefix):]):
                return UrlKind.ORIGIN_ABSOLUTE

        prefix = UrlUtils.PROTOCOL_RELATIVE_ORIGIN
        if url.startswith(prefix) and UrlUtils._is_host_boundary(url[len(prefix):]):
            return UrlKind.ORIGIN_PROTOCOL_RELATIVE

        if url.startswith("//"):
            return UrlKind.PROTOCOL_RELATIVE
        if url.startswith("http"):
            return UrlKind.ABSOLUTE
        return UrlKind.RELATIVE

    @staticmethod
    def to_origin_relative(href: str) -> Optional[str]:
        """
        Strips scheme and host from an upstream link.

        Returns:
            Optional[str]: The origin-relative path (never empty), or None when the
                           href does not point at the upstream origin.
        """
        kind = UrlUtils.classify(href)
        if kind is UrlKind.ORIGIN_ABSOLUTE:
            remainder = href.split(UPSTREAM_HOST, 1)[1]
        elif kind is UrlKind.ORIGIN_PROTOCOL_RELATIVE:
            remainder = href[len(UrlUtils.PROTOCOL_RELATIVE_ORIGIN):]
        else:
            return None

        if not remainder:
            return "/"
        if remainder[0] in "?#":
            return "/" + remainder
        return remainder

    @staticmethod
    def absolutize_asset_url(src: str) -> Optional[str]:
        """
        Makes an img/script source loadable from outside the upstream site.

        Returns:
            Optional[str]: The rewritten URL, or None when the value is left untouched.
        """
        kind = UrlUtils.classify(src)
        if kind is UrlKind.RELATIVE:
            return UrlUtils.build_upstream_url(src)
        if kind in (UrlKind.PROTOCOL_RELATIVE, UrlKind.ORIGIN_PROTOCOL_RELATIVE):
            return f"https:{src}"
        return None

    @staticmethod
    def build_upstream_url(path: str) -> str:
        """Joins a path onto the upstream origin with exactly one separating slash."""
        return UPSTREAM_ORIGIN + (path if path.startswith("/") else "/" + path)

    @staticmethod
    def build_upstream_path(segments: Optional[Iterable[str]]) -> str:
        """
        Maps the path segments of an incoming request to a single leading-slash path.
        Empty segments (double or trailing slashes) are dropped; no segments means '/'.
        """
        parts = [segment for segment in (segments or []) if segment]
        if not parts:
            return "/"
        return "/" + "/".join(parts)
