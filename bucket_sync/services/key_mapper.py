"""
Mapping between local file paths and object keys.

Upload keys are built with path semantics (segments joined with ``/`` and the
result cleaned); download paths are built by plain string prefix handling.
The two directions are not exact inverses of each other: a strip prefix
without a trailing slash, or a target that lost its leading slash, will not
round-trip.
"""
import os
import posixpath


def to_slash(path: str) -> str:
    """Replace the platform separator with ``/``."""
    if os.sep != '/':
        path = path.replace(os.sep, '/')
    return path


def normalize_target(target: str) -> str:
    """Strip a single leading ``/`` from the configured target."""
    if target.startswith('/'):
        return target[1:]
    return target


def _clean(path: str) -> str:
    """Lexically clean a slash separated path; an empty result stays empty."""
    if not path:
        return ''
    cleaned = posixpath.normpath(path)
    # normpath keeps a leading double slash
    if cleaned.startswith('//'):
        cleaned = '/' + cleaned.lstrip('/')
    return '' if cleaned == '.' else cleaned


def resolve_key(target: str, src_path: str, strip_prefix: str = '') -> str:
    """
    Return the object key a local file is uploaded to.

    ``strip_prefix`` is removed from the front of ``src_path`` when present and
    the remainder is joined onto ``target``. The key always starts with ``/``.

    >>> resolve_key('/assets', 'dist/js/app.js', 'dist/')
    '/assets/js/app.js'
    """
    src_path = to_slash(src_path)
    strip_prefix = to_slash(strip_prefix)
    if strip_prefix and src_path.startswith(strip_prefix):
        src_path = src_path[len(strip_prefix):]

    key = _clean('/'.join(part for part in (to_slash(target), src_path) if part))
    if not key.startswith('/'):
        key = '/' + key
    return key


def resolve_source(target_dir: str, key: str, strip_prefix: str = '') -> str:
    """
    Return the local path a downloaded object is written to.

    ``target_dir`` is removed from the front of ``key`` as a literal string,
    then a single leading ``/``, and ``strip_prefix`` is prepended as is.

    >>> resolve_source('assets', 'assets/js/app.js', 'dist/')
    'dist/js/app.js'
    """
    path = key[len(target_dir):] if key.startswith(target_dir) else key
    if path.startswith('/'):
        path = path[1:]
    return strip_prefix + path


def resolve_target_dir(target: str) -> str:
    """Prefix listed in download mode: forward slashes, no leading ``/``."""
    return normalize_target(to_slash(normalize_target(target)))
