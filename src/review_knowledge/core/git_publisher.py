"""Commit and push the policy document using GitPython."""

from pathlib import Path
from typing import List, Optional, Protocol, Sequence

import git
from git import PushInfo, Repo

from review_knowledge.errors import GitError, ValidationError
from review_knowledge.models.commit import CommitRecord, CommitResult

BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"
DEFAULT_REMOTE = "origin"

# git config levels accepted for the bot identity
IDENTITY_SCOPES = ("global", "repository")

PUSH_FAILURE_FLAGS = (
    PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED | PushInfo.REMOTE_FAILURE
)


class RemoteAuthenticator(Protocol):
    """Produces a remote URL that carries credentials for pushing."""

    def authenticated_url(self, token: str, repository: str) -> str: ...


class GitHubTokenAuthenticator:
    """Embed a GitHub token in an HTTPS remote URL."""

    def __init__(self, host: str = "github.com"):
        self.host = host

    def authenticated_url(self, token: str, repository: str) -> str:
        return f"https://x-access-token:{token}@{self.host}/{repository}.git"


class GitPublisher:
    """Stages, commits and pushes files in an existing working tree."""

    def __init__(
        self,
        repo_root: Path,
        identity_scope: str = "global",
        remote_name: str = DEFAULT_REMOTE,
        authenticator: Optional[RemoteAuthenticator] = None,
    ):
        if identity_scope not in IDENTITY_SCOPES:
            raise ValueError(f"Unknown identity scope: {identity_scope}")

        self.repo_root = Path(repo_root)
        self.identity_scope = identity_scope
        self.remote_name = remote_name
        self.authenticator = authenticator or GitHubTokenAuthenticator()
        self._repo: Optional[Repo] = None
        self._secrets: List[str] = []

    @property
    def repo(self) -> Repo:
        """Get the git repository for the working tree."""
        if self._repo is None:
            try:
                self._repo = Repo(self.repo_root, search_parent_directories=True)
            except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
                raise GitError(f"No git repository found in {self.repo_root}") from e
        return self._repo

    def ensure_identity(self, name: str = BOT_NAME, email: str = BOT_EMAIL) -> bool:
        """Set user.name and user.email unless they already match.

        Returns:
            True if the config was written, False if it was already in place
        """
        reader = self.repo.config_reader(config_level=self.identity_scope)
        current = (
            reader.get_value("user", "name", default=""),
            reader.get_value("user", "email", default=""),
        )
        if current == (name, email):
            return False

        with self.repo.config_writer(config_level=self.identity_scope) as config:
            config.set_value("user", "name", name)
            config.set_value("user", "email", email)
        return True

    def stage(self, file_paths: Sequence[str]) -> None:
        """Stage exactly the given paths."""
        try:
            self.repo.index.add([str(p) for p in file_paths])
        except (OSError, ValueError, git.exc.GitCommandError) as e:
            raise GitError(f"Failed to stage {', '.join(map(str, file_paths))}: {e}") from e

    def has_staged_changes(self) -> bool:
        """Check whether the index differs from HEAD."""
        if not self.repo.head.is_valid():
            return bool(self.repo.index.entries)
        return bool(self.repo.index.diff("HEAD"))

    def commit(self, message: str) -> str:
        """Commit the index and return the new commit hash."""
        if not self.has_staged_changes():
            raise GitError("Nothing to commit: staged files match HEAD")

        try:
            # Use the git CLI so commit hooks run
            self.repo.git.commit("-m", message)
        except git.exc.GitCommandError as e:
            raise GitError(f"Commit failed: {self._redact(str(e))}") from None

        return self.repo.head.commit.hexsha

    def remove_remote_if_present(self, name: str) -> bool:
        """Delete a remote, doing nothing if it does not exist."""
        if name not in [r.name for r in self.repo.remotes]:
            return False
        self.repo.delete_remote(self.repo.remote(name))
        return True

    def set_remote(self, name: str, url: str) -> None:
        """Point ``name`` at ``url``, replacing any existing remote."""
        self.remove_remote_if_present(name)
        self.repo.create_remote(name, url)

    def authenticate_remote(self, token: str, repository: str) -> None:
        """Rewrite the push remote with a credential-bearing URL."""
        self._secrets.append(token)
        self.set_remote(
            self.remote_name, self.authenticator.authenticated_url(token, repository)
        )

    def push(self, branch: str) -> None:
        """Push ``branch`` to the configured remote without forcing."""
        try:
            results = self.repo.remote(self.remote_name).push(refspec=branch)
        except ValueError as e:
            raise GitError(f"Remote '{self.remote_name}' does not exist") from e
        except git.exc.GitCommandError as e:
            raise GitError(f"Push failed: {self._redact(str(e))}") from None

        if not results:
            raise GitError(f"Push failed: nothing was pushed for '{branch}'")

        for info in results:
            if info.flags & PUSH_FAILURE_FLAGS:
                summary = self._redact(info.summary.strip())
                raise GitError(f"Push of '{branch}' rejected: {summary}")

    def publish(
        self,
        record: CommitRecord,
        token: Optional[str] = None,
        repository: Optional[str] = None,
        bot_name: str = BOT_NAME,
        bot_email: str = BOT_EMAIL,
    ) -> CommitResult:
        """Commit the record's files and push them to its branch.

        The remote is only rewritten when a token is given. Nothing is
        retried and nothing is rolled back if the push fails.
        """
        if token and not repository:
            raise ValidationError("GITHUB_REPOSITORY is required when GITHUB_TOKEN is set")

        self.ensure_identity(bot_name, bot_email)
        self.stage(record.file_paths)
        commit_hash = self.commit(record.message)

        if token:
            self.authenticate_remote(token, repository)

        self.push(record.branch)
        return CommitResult(commit_hash=commit_hash, branch=record.branch)

    def _redact(self, text: str) -> str:
        for secret in self._secrets:
            text = text.replace(secret, "***")
        return text
