"""
URL Classification and Normalization Utilities

This module provides the small, pure helpers the base-rewrite engine is
built on: deciding whether an href is absolute or templated, deriving the
directory URL that contains a document, and computing POSIX relative paths
between two directories.
"""

from __future__ import annotations

import posixpath
import re
from typing import List, NewType, TypeVar, cast
from urllib.parse import urlsplit, urlunsplit


# A URL believed to be fully resolved (scheme + host, or server-absolute path)
ResolvedUrl = NewType('ResolvedUrl', str)
# A URL expressed relative to some base
FileRelativeUrl = NewType('FileRelativeUrl', str)

T = TypeVar('T', bound=str)

# Leading '/', a fragment-only reference, or a URI scheme (RFC 3986 grammar)
ABS_URL = re.compile(r'(^/)|(^#)|(^[a-z][a-z0-9+.\-]*:)', re.I)
URL_TEMPLATE = re.compile(r'{{.*}}|\[\[.*\]\]')


def ensure_trailing_slash(href: str) -> str:
    """Append a '/' to href unless it already ends with one."""
    return href if href.endswith('/') else href + '/'


def strip_url_file_search_and_hash(href: T) -> T:
    """
    Return the directory URL containing href.

    The basename is removed from the path and the query and fragment are
    dropped, since they do not apply to the directory. A path that already
    ends in '/' names a directory and is returned as that same directory.

    Args:
        href: URL or path to strip

    Returns:
        Directory URL with a trailing slash, of the same tagged type as href
    """
    parsed = urlsplit(href)
    path = parsed.path
    if path:
        # Suffix with '_' so that '/a/b/' is treated as '/a/b/_' and dirname()
        # returns '/a/b' rather than '/a'.
        path = ensure_trailing_slash(posixpath.dirname(path + '_') or '.')
    elif parsed.netloc:
        path = '/'
    return cast(T, urlunsplit((parsed.scheme, parsed.netloc, path, '', '')))


def is_absolute_path(href: str) -> bool:
    """Return True if href does not depend on any base URL."""
    return ABS_URL.search(href) is not None


def is_templated_url(href: str) -> bool:
    """Return True if href is a templated value, i.e. `{{...}}` or `[[...]]`."""
    return URL_TEMPLATE.search(href) is not None


def make_absolute_path(path: str) -> str:
    return path if path.startswith('/') else '/' + path


def _segments(path: str) -> List[str]:
    if not path:
        return []
    return [seg for seg in posixpath.normpath(path).split('/') if seg and seg != '.']


def relative_path(from_dir: str, to_path: str) -> str:
    """
    Compute the relative path leading from the directory from_dir to to_path.

    Shared leading segments are eliminated, then one '..' is emitted for each
    remaining segment of from_dir followed by the remaining segments of
    to_path. Unlike posixpath.relpath() the process working directory is never
    consulted, so two relative inputs stay relative to each other.

    Args:
        from_dir: Directory the result will be resolved against
        to_path: Target path

    Returns:
        POSIX relative path; '.' when both name the same location
    """
    if from_dir.startswith('/') != to_path.startswith('/'):
        from_dir = make_absolute_path(from_dir)
        to_path = make_absolute_path(to_path)

    from_parts = _segments(from_dir)
    to_parts = _segments(to_path)

    common = 0
    for a, b in zip(from_parts, to_parts):
        if a != b:
            break
        common += 1

    ascent = len(from_parts) - common
    down_to_target = to_parts[common:]
    if not down_to_target and to_parts and not to_path.endswith('/'):
        # The target is a file sharing its name with an ancestor directory
        # of from_dir: climb one level further and name it.
        ascent += 1
        down_to_target = to_parts[-1:]

    relative = '/'.join(['..'] * ascent + down_to_target) or '.'

    # Keep directory targets pointing at the directory itself
    if to_path.endswith('/') and not relative.endswith('/'):
        relative += '/'
    return relative
