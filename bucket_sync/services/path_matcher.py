"""
Glob based selection of local files to upload.
"""
import glob
from typing import Iterable, List, Set

from loguru import logger

from ..exceptions import GlobError


def expand_pattern(pattern: str) -> List[str]:
    """
    Expand a glob pattern supporting ``*``, ``?``, character classes and
    recursive ``**``. Wildcards also match hidden (dot) files.

    Results are sorted so repeated runs over the same tree yield the same order.

    Raises:
        GlobError: If the pattern is empty or the filesystem cannot be traversed
    """
    if not pattern:
        raise GlobError("Glob pattern must not be empty")

    try:
        return sorted(glob.glob(pattern, recursive=True, include_hidden=True))
    except (OSError, ValueError) as e:
        raise GlobError(f"Could not expand pattern {pattern!r}: {e}", path=pattern) from e


def match_files(include: str, excludes: Iterable[str] = ()) -> List[str]:
    """
    Return every path matched by ``include`` that no exclude pattern matches.

    Exclusion is by exact path membership: each exclude pattern is expanded on
    its own and the union of the results is removed from the include matches.

    Args:
        include: Glob pattern selecting candidate paths
        excludes: Glob patterns whose matches are dropped

    Returns:
        List[str]: Matching paths, directories included

    Raises:
        GlobError: If any pattern cannot be expanded
    """
    matches = expand_pattern(include)
    excludes = list(excludes)
    if not excludes:
        return matches

    excluded: Set[str] = set()
    for pattern in excludes:
        excluded.update(expand_pattern(pattern))

    included = [path for path in matches if path not in excluded]
    logger.debug(f"Matched {len(matches)} paths for {include!r}, {len(matches) - len(included)} excluded")
    return included
