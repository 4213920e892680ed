"""
hrefshift: Href Base-URL Rewriting

Rewrites the relative references inside a document so that they keep
pointing at the same resources after the document is relocated from one
base URL to another, as needed when bundling assets.
"""

from .core.rewriter import HrefRewriter, RewriteConfig, rewrite_href_base_url
from .utils.url_utils import (
    FileRelativeUrl,
    ResolvedUrl,
    ensure_trailing_slash,
    is_absolute_path,
    is_templated_url,
    relative_path,
    strip_url_file_search_and_hash,
)

__version__ = "1.0"
__author__ = "hrefshift Project"
__description__ = "Href Base-URL Rewriting"
