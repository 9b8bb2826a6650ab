"""Path-level tree diffing between a commit and its predecessor."""

import logging
from typing import List, NamedTuple, Optional

import git

from git_provenance.errors import DiffError
from git_provenance.models.commit import ChangeType

logger = logging.getLogger(__name__)


class TouchedPath(NamedTuple):
    """A repository-relative path changed by a commit."""

    path: str
    change_type: ChangeType


def touched_paths(
    commit: git.Commit,
    predecessor: Optional[git.Commit],
    detect_renames: bool = True,
    track_deletions: bool = True,
) -> List[TouchedPath]:
    """Compute the paths ``commit`` changed relative to ``predecessor``.

    Every entry contributes its new path, so a rename touches only the path
    it was renamed to. Deleted files contribute their old path when
    ``track_deletions`` is set. Without a predecessor the commit is compared
    with the empty tree and every file in it counts as added.

    Raises:
        DiffError: if the trees cannot be compared.
    """
    try:
        if predecessor is None:
            return _root_paths(commit)
        return _diff_paths(commit, predecessor, detect_renames, track_deletions)
    except (git.exc.GitError, ValueError, OSError) as e:
        raise DiffError(f"Failed to diff commit [{commit.hexsha}]: {e}") from e


def _root_paths(commit: git.Commit) -> List[TouchedPath]:
    return [
        TouchedPath(item.path, ChangeType.ADDED)
        for item in commit.tree.traverse()
        if item.type == "blob"
    ]


def _diff_paths(
    commit: git.Commit,
    predecessor: git.Commit,
    detect_renames: bool,
    track_deletions: bool,
) -> List[TouchedPath]:
    if detect_renames:
        diff_index = predecessor.diff(commit, find_renames=True)
    else:
        diff_index = predecessor.diff(commit, no_renames=True)

    paths: List[TouchedPath] = []
    for diff in diff_index:
        change_type = ChangeType.from_git(diff.change_type)
        if diff.deleted_file or change_type is ChangeType.DELETED:
            if track_deletions and diff.a_path:
                paths.append(TouchedPath(diff.a_path, ChangeType.DELETED))
            continue
        path = diff.b_path or diff.a_path
        if path:
            paths.append(TouchedPath(path, change_type))
        else:
            logger.debug("Skipping diff entry without a path in %s", commit.hexsha)
    return paths
