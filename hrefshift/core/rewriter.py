"""
Href base-rewrite engine.

Rewrites hrefs found in a document so that they keep pointing at the same
resources once the document is emitted relative to a new base URL. The
module-level engine is pure; HrefRewriter wraps it for callers rewriting many
hrefs at once, filtering out templated values and keeping counters.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple, Union
from concurrent.futures import ThreadPoolExecutor, as_completed
from urllib.parse import SplitResult, urljoin, urlsplit, urlunsplit

from .tracker import RewriteTracker
from ..utils.url_utils import (
    FileRelativeUrl,
    ResolvedUrl,
    T,
    is_absolute_path,
    is_templated_url,
    make_absolute_path,
    relative_path,
    strip_url_file_search_and_hash,
)


logger = logging.getLogger(__name__)


def _origin(parsed: SplitResult) -> Tuple[str, Optional[str], Optional[int]]:
    # Userinfo is not part of the origin; hostname is already lowercased
    return parsed.scheme, parsed.hostname, parsed.port


def _rebase(href: T, old_base_url: ResolvedUrl, new_base_url: ResolvedUrl) -> Union[T, FileRelativeUrl]:
    if is_absolute_path(href):
        return href

    target = urljoin(old_base_url, href)
    parsed_from = urlsplit(new_base_url)
    parsed_to = urlsplit(target)

    if _origin(parsed_from) != _origin(parsed_to):
        # No relative form exists across origins
        return FileRelativeUrl(target)

    dir_from = urlsplit(strip_url_file_search_and_hash(new_base_url)).path
    path_to = parsed_to.path
    if not path_to and parsed_to.netloc:
        path_to = '/'
    if is_absolute_path(old_base_url) or is_absolute_path(new_base_url):
        dir_from = make_absolute_path(dir_from)
        path_to = make_absolute_path(path_to)

    pathname = relative_path(dir_from, path_to)
    if ':' in pathname.split('/', 1)[0]:
        # 'a:b.png' would otherwise read as a URL with scheme 'a'
        pathname = './' + pathname

    return FileRelativeUrl(urlunsplit(('', '', pathname, parsed_to.query, parsed_to.fragment)))


def rewrite_href_base_url(href: T, old_base_url: ResolvedUrl, new_base_url: ResolvedUrl) -> Union[T, FileRelativeUrl]:
    """
    Modify an href by the relative difference between two base URLs.

    Absolute hrefs are returned untouched. A relative href is resolved against
    old_base_url; if the result shares its origin with new_base_url a relative
    href from new_base_url's directory is returned, otherwise the fully
    resolved URL is. Templated hrefs must be filtered out by the caller.

    Args:
        href: Reference found in the document
        old_base_url: URL the document was resolved against
        new_base_url: URL the document will be resolved against

    Returns:
        Rewritten href. Never raises: an unparseable input comes back as is.
    """
    try:
        return _rebase(href, old_base_url, new_base_url)
    except ValueError as e:
        logger.warning(f"Could not rewrite href {href!r} from {old_base_url!r} to {new_base_url!r}: {e}")
        return href


@dataclass
class RewriteConfig:
    old_base_url: ResolvedUrl
    new_base_url: ResolvedUrl
    skip_templated: bool = True
    concurrency: int = 1


class HrefRewriter:
    def __init__(self, config: RewriteConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.tracker = RewriteTracker(config.old_base_url, config.new_base_url, self.logger)
        self.stats = {"total": 0, "rewritten": 0, "unchanged": 0, "templated": 0, "failed": 0}
        self._stats_lock = threading.Lock()

    def _count(self, key: str):
        with self._stats_lock:
            self.stats["total"] += 1
            self.stats[key] += 1

    def rewrite(self, href: str) -> str:
        """Rewrite a single href from the configured old base to the new one."""
        if not href:
            self._count("unchanged")
            return href
        if self.config.skip_templated and is_templated_url(href):
            self.logger.debug(f"Skipping templated href: {href}")
            self._count("templated")
            return href

        try:
            result = _rebase(href, self.config.old_base_url, self.config.new_base_url)
        except ValueError as e:
            self.tracker.log_warning(href, e)
            self._count("failed")
            return href

        self._count("rewritten" if result != href else "unchanged")
        return result

    def rewrite_many(self, hrefs: Iterable[str],
                     progress: Optional[Callable[[object], None]] = None) -> Dict[str, str]:
        """
        Rewrite a batch of hrefs.

        Duplicates are rewritten once. With concurrency > 1 the work is spread
        over a thread pool; the engine holds no shared state so only the
        counters need a lock.

        Returns:
            Mapping of original href -> rewritten href, in input order
        """
        unique = list(dict.fromkeys(hrefs))
        with self._stats_lock:
            rewritten_before = self.stats["rewritten"]
        mapping: Dict[str, str] = {}

        if self.config.concurrency and self.config.concurrency > 1:
            with ThreadPoolExecutor(max_workers=self.config.concurrency) as ex:
                futures = {ex.submit(self.rewrite, href): href for href in unique}
                results = {}
                for fut in as_completed(futures):
                    results[futures[fut]] = fut.result()
            for href in unique:
                mapping[href] = results[href]
        else:
            for href in unique:
                mapping[href] = self.rewrite(href)

        with self._stats_lock:
            rewritten = self.stats["rewritten"] - rewritten_before
        self.logger.info(
            f"Rewrote {rewritten} of {len(unique)} hrefs "
            f"from {self.config.old_base_url} to {self.config.new_base_url}"
        )
        if progress:
            progress({"type": "counters", "stats": dict(self.stats)})
        return mapping

    def get_summary(self) -> Dict[str, object]:
        with self._stats_lock:
            stats = dict(self.stats)
        return {"stats": stats, "warnings": self.tracker.get_summary()}
