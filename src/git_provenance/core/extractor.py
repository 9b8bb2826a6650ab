"""Commit history extraction from a git repository."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

import git
from git import Repo

from git_provenance.config import ProvenanceConfig
from git_provenance.core.cancellation import CancellationToken
from git_provenance.core.diffing import touched_paths
from git_provenance.core.resolution import resolve_predecessor, shallow_commits
from git_provenance.errors import ExtractionCancelledError, ExtractionError
from git_provenance.models.author import Author
from git_provenance.models.commit import CommitHistory, CommitRecord
from git_provenance.models.time_window import from_epoch_seconds

logger = logging.getLogger(__name__)

RepoFactory = Callable[[], Repo]


class CommitHistoryExtractor:
    """Walks every commit reachable from any ref and records what it touched.

    The repository handle is opened for the duration of one extraction and
    always closed afterwards. Extraction either returns a complete
    CommitHistory or raises a single ExtractionError.
    """

    def __init__(
        self,
        repo_path: Optional[Union[str, Path]] = None,
        config: Optional[ProvenanceConfig] = None,
        repo_factory: Optional[RepoFactory] = None,
    ):
        if repo_path is None and repo_factory is None:
            raise ValueError("A repository path or a repository factory is required")
        self.repo_path = Path(repo_path) if repo_path is not None else None
        self.config = config or ProvenanceConfig()
        self._repo_factory = repo_factory or self._open_repo

    @classmethod
    def from_repo_factory(
        cls, repo_factory: RepoFactory, config: Optional[ProvenanceConfig] = None
    ) -> "CommitHistoryExtractor":
        return cls(config=config, repo_factory=repo_factory)

    def _open_repo(self) -> Repo:
        return Repo(self.repo_path)

    def extract(self, cancellation: Optional[CancellationToken] = None) -> CommitHistory:
        """Build the commit history of the repository.

        Raises:
            ExtractionError: if walking, resolving or diffing fails.
            ExtractionCancelledError: if ``cancellation`` was triggered.
        """
        cancellation = cancellation or CancellationToken()
        try:
            with self._repo_factory() as repo:
                logger.info("Loading commit history from %s", repo.working_dir)
                commits = self._reachable_commits(repo, cancellation)
                positions = walk_positions(commits)
                if self.config.max_workers > 1 and len(commits) > 1:
                    records = self._records_in_parallel(positions, cancellation)
                else:
                    shallow = shallow_commits(repo)
                    records = []
                    for hexsha, commit in commits.items():
                        cancellation.raise_if_cancelled()
                        records.append(
                            self._commit_record(
                                repo, commit, positions[hexsha], shallow
                            )
                        )
            history = CommitHistory.of(records)
        except ExtractionCancelledError:
            logger.info("Commit history extraction cancelled")
            raise
        except Exception as e:
            logger.error("Failed to load commit history: %s", e)
            raise ExtractionError() from e

        logger.info("Loaded %d commits", len(history))
        return history

    def _reachable_commits(
        self, repo: Repo, cancellation: CancellationToken
    ) -> Dict[str, git.Commit]:
        """All commits reachable from every ref, deduplicated by hash.

        Commits come in topological order, children before their parents.
        """
        kwargs = {"topo_order": True}
        if self.config.max_count:
            kwargs["max_count"] = self.config.max_count

        commits: Dict[str, git.Commit] = {}
        for commit in repo.iter_commits(self.config.rev or "--all", **kwargs):
            cancellation.raise_if_cancelled()
            commits.setdefault(commit.hexsha, commit)
        logger.debug("Found %d reachable commits", len(commits))
        return commits

    def _commit_record(
        self,
        repo: Repo,
        commit: git.Commit,
        position: int,
        shallow: FrozenSet[str],
    ) -> CommitRecord:
        resolution = resolve_predecessor(repo, commit, shallow=shallow)
        record = new_commit_record(commit, position)
        for touched in touched_paths(
            commit,
            resolution.predecessor,
            detect_renames=self.config.detect_renames,
            track_deletions=self.config.track_deletions,
        ):
            record.add(touched.path, change_type=touched.change_type)
        logger.debug(
            "Commit %s (%s) touched %d paths",
            record.short_hash,
            resolution.strategy,
            len(record.files),
        )
        return record

    def _records_in_parallel(
        self, positions: Dict[str, int], cancellation: CancellationToken
    ) -> List[CommitRecord]:
        items = list(positions.items())
        workers = min(self.config.max_workers, len(items))
        chunks = [items[i::workers] for i in range(workers)]

        def run(chunk: List[Tuple[str, int]]) -> List[CommitRecord]:
            # Each worker diffs against its own repository handle.
            with self._repo_factory() as worker_repo:
                shallow = shallow_commits(worker_repo)
                chunk_records = []
                for hexsha, position in chunk:
                    cancellation.raise_if_cancelled()
                    chunk_records.append(
                        self._commit_record(
                            worker_repo,
                            worker_repo.commit(hexsha),
                            position,
                            shallow,
                        )
                    )
                return chunk_records

        records: Dict[str, CommitRecord] = {}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            for chunk_records in executor.map(run, chunks):
                for record in chunk_records:
                    records.setdefault(record.hash, record)
        return list(records.values())


def walk_positions(commits: Dict[str, git.Commit]) -> Dict[str, int]:
    """Number topologically ordered commits so that parents come first."""
    last = len(commits) - 1
    return {hexsha: last - index for index, hexsha in enumerate(commits)}


def new_commit_record(commit: git.Commit, position: int = 0) -> CommitRecord:
    """Normalize a git commit into a CommitRecord without touched paths.

    Credits the committer identity rather than the author identity.
    """
    committer = commit.committer
    author = Author(name=committer.name or "", email_address=committer.email or "")
    message = commit.message
    if isinstance(message, bytes):
        message = message.decode("utf-8", errors="replace")
    return CommitRecord(
        author=author,
        date_time=from_epoch_seconds(commit.committed_date),
        hash=commit.hexsha,
        position=position,
    ).with_message(message)


def load_commit_history(
    repo_path: Union[str, Path],
    config: Optional[ProvenanceConfig] = None,
    cancellation: Optional[CancellationToken] = None,
) -> CommitHistory:
    """Extract the commit history of the repository at ``repo_path``."""
    return CommitHistoryExtractor(repo_path, config=config).extract(cancellation)
