"""
Per-file object metadata resolved from pattern rule tables.
"""
import mimetypes
import os
from typing import Optional, Tuple

from ..models.config import PluginConfig, RuleSource, as_rules

DEFAULT_CONTENT_TYPE = 'application/octet-stream'


def match_rule(path: str, rules: RuleSource) -> Optional[str]:
    """
    Return the value of the first rule whose pattern is found in ``path``.

    Patterns are searched for anywhere in the path, not matched against the
    whole of it. Returns None when no rule matches.

    Raises:
        ConfigurationError: If ``rules`` is a plain mapping holding an invalid pattern
    """
    for pattern, value in as_rules(rules):
        if pattern.search(path):
            return value
    return None


def resolve_content_type(path: str, rules: RuleSource = None) -> str:
    """Rule value, else the system MIME table, else application/octet-stream."""
    content_type = match_rule(path, rules)
    if content_type:
        return content_type

    # final extension only: app.js.gz is a gzip file, not javascript
    extension = os.path.splitext(path)[1].lower()
    if extension:
        content_type, _ = mimetypes.guess_type(f"file{extension}", strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


def resolve_metadata(path: str, config: PluginConfig) -> Tuple[str, Optional[str], Optional[str]]:
    """Resolve (content type, content encoding, cache control) for ``path``."""
    return (
        resolve_content_type(path, config.content_type),
        match_rule(path, config.content_encoding),
        match_rule(path, config.cache_control)
    )

