"""Predecessor resolution for commits being diffed.

A commit's predecessor is resolved by trying an ordered list of strategies;
the first one that yields a commit present in the object database wins. Root
commits and shallow-clone boundaries have no predecessor and are diffed
against the empty tree instead.
"""

import logging
from pathlib import Path
from typing import Callable, FrozenSet, List, NamedTuple, Optional, Sequence, Tuple

import git
from git import Repo

from git_provenance.errors import ResolutionError

logger = logging.getLogger(__name__)

HEAD = "HEAD"

_RESOLUTION_ERRORS = (git.exc.BadName, git.exc.BadObject, ValueError, IndexError)


class Resolution(NamedTuple):
    """Outcome of resolving a commit's predecessor.

    ``predecessor`` is None for root commits, which compare against the
    empty tree.
    """

    predecessor: Optional[git.Commit]
    strategy: str

    @property
    def is_root(self) -> bool:
        return self.predecessor is None


Strategy = Tuple[str, Callable[[Repo, git.Commit], Optional[git.Commit]]]


def _first_parent(repo: Repo, commit: git.Commit) -> Optional[git.Commit]:
    return _rev_parse_commit(repo, f"{commit.hexsha}~1")


def _head(repo: Repo, commit: git.Commit) -> Optional[git.Commit]:
    return _rev_parse_commit(repo, HEAD)


def _rev_parse_commit(repo: Repo, expression: str) -> Optional[git.Commit]:
    try:
        target = repo.rev_parse(expression)
    except _RESOLUTION_ERRORS:
        return None
    # Annotated tags resolve to tag objects.
    while isinstance(target, git.TagObject):
        target = target.object
    if not isinstance(target, git.Commit) or not is_available(repo, target):
        return None
    return target


def is_available(repo: Repo, commit: git.Commit) -> bool:
    """Whether the commit object is present locally.

    Ref expressions resolve to ids without reading the object, so a parent
    cut off by a shallow clone still resolves.
    """
    try:
        repo.odb.info(commit.binsha)
    except (ValueError, git.exc.BadObject, git.exc.GitCommandError):
        return False
    return True


def shallow_commits(repo: Repo) -> FrozenSet[str]:
    """Hashes of the boundary commits of a shallow clone; empty otherwise."""
    shallow_file = Path(repo.common_dir) / "shallow"
    if not shallow_file.is_file():
        return frozenset()
    return frozenset(shallow_file.read_text().split())


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    ("first-parent", _first_parent),
    ("head", _head),
)


def resolve_predecessor(
    repo: Repo,
    commit: git.Commit,
    strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    shallow: Optional[FrozenSet[str]] = None,
) -> Resolution:
    """Resolve the commit to diff ``commit`` against.

    ``shallow`` lists shallow-clone boundary commits; it is read from the
    repository when not given.

    Raises:
        ResolutionError: if no strategy resolves a predecessor.
    """
    if shallow is None:
        shallow = shallow_commits(repo)
    if not commit.parents or commit.hexsha in shallow:
        return Resolution(None, "root")

    attempted: List[str] = []
    for name, strategy in strategies:
        predecessor = strategy(repo, commit)
        if predecessor is not None:
            if attempted:
                logger.debug(
                    "Resolved predecessor of %s via %s after %s failed",
                    commit.hexsha,
                    name,
                    ", ".join(attempted),
                )
            return Resolution(predecessor, name)
        attempted.append(name)

    raise ResolutionError(
        f"{commit.hexsha}~1",
        f"Failed to resolve predecessor of [{commit.hexsha}] "
        f"(tried {', '.join(attempted)})",
    )
