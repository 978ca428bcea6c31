"""Append a review comment to the policy document, then commit and push it."""

from typing import Optional

from rich.console import Console

from review_knowledge.config import Settings
from review_knowledge.core.file_store import write_file
from review_knowledge.core.formatter import format_block
from review_knowledge.core.git_publisher import GitHubTokenAuthenticator, GitPublisher
from review_knowledge.core.normalizer import normalize_comment
from review_knowledge.models.comment import Comment
from review_knowledge.models.commit import CommitRecord, CommitResult
from review_knowledge.models.results import PipelineResult, WriteResult

COMMIT_PREFIX = "chore: [must]コメントからナレッジ自動追加"


def build_commit_message(comment_url: str) -> str:
    """Commit message recording where the knowledge came from."""
    return f"{COMMIT_PREFIX}\n\n出典: {comment_url}"


class AppendCommitPipeline:
    """Two ordered steps: append the entry, then commit and push it.

    The append is not idempotent and is never rolled back. If the commit
    step fails the policy document is left with an uncommitted change,
    which shows up as a working tree diff on the next run.
    """

    def __init__(
        self,
        settings: Settings,
        publisher: Optional[GitPublisher] = None,
        console: Optional[Console] = None,
    ):
        self.settings = settings
        self.publisher = publisher or GitPublisher(
            settings.repo_root,
            identity_scope=settings.identity_scope,
            remote_name=settings.remote_name,
            authenticator=GitHubTokenAuthenticator(settings.github_host),
        )
        self.console = console or Console()

    def render(self, comment: Comment) -> str:
        """Normalize the comment body and format the policy entry."""
        body = normalize_comment(comment.body)
        self.console.print("✅ Normalized comment body")
        return format_block(comment.model_copy(update={"body": body}), self.settings.timezone)

    def append(self, content: str) -> WriteResult:
        """Append an entry to the policy document."""
        result = write_file(self.settings.target_file, content, mode="append")
        self.console.print(
            f"✅ Appended to {self.settings.target_path} ({result.bytes_written} bytes)"
        )
        return result

    def commit(self, record: CommitRecord) -> CommitResult:
        """Commit the record's files and push them to its branch."""
        result = self.publisher.publish(
            record,
            token=self.settings.github_token,
            repository=self.settings.github_repository,
            bot_name=self.settings.bot_name,
            bot_email=self.settings.bot_email,
        )
        self.console.print(f"✅ Committed {result.commit_hash[:8]}", markup=False)
        self.console.print(
            f"✅ Pushed to {self.settings.remote_name}/{result.branch}", markup=False
        )
        return result

    def run(self, comment: Comment, branch: str) -> PipelineResult:
        """Run normalize, format, append and commit in order."""
        # Format before touching the file so bad input never mutates it
        content = self.render(comment)

        self.console.print("[bold]Step 1:[/bold] append to policy document")
        write_result = self.append(content)

        self.console.print("[bold]Step 2:[/bold] commit and push")
        record = CommitRecord(
            file_paths=[str(self.settings.target_file)],
            message=build_commit_message(comment.url),
            branch=branch,
        )
        commit_result = self.commit(record)

        return PipelineResult(
            target_path=self.settings.target_path,
            bytes_written=write_result.bytes_written,
            commit_hash=commit_result.commit_hash,
            branch=commit_result.branch,
        )
