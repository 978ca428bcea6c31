"""Main CLI interface for Review Knowledge."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from review_knowledge.config import DEFAULT_TARGET, Settings, load_settings, require
from review_knowledge.core.file_store import read_file
from review_knowledge.core.formatter import DEFAULT_TIMEZONE
from review_knowledge.core.pipeline import AppendCommitPipeline
from review_knowledge.errors import KnowledgeError
from review_knowledge.models.comment import Comment

console = Console()
err_console = Console(stderr=True)


def comment_options(func):
    """Options describing the review comment, readable from the environment."""
    func = click.option(
        "--timestamp",
        envvar="TIMESTAMP",
        help="ISO-8601 time the comment was made (defaults to now)",
    )(func)
    func = click.option(
        "--url", envvar="COMMENT_URL", help="Absolute URL of the comment"
    )(func)
    func = click.option(
        "--body", envvar="COMMENT_BODY", help="Raw comment text, may start with [must]"
    )(func)
    return func


def location_options(func):
    """Options locating the policy document."""
    func = click.option(
        "--target",
        envvar="KNOWLEDGE_TARGET",
        default=str(DEFAULT_TARGET),
        show_default=True,
        help="Policy document path relative to the repository",
    )(func)
    func = click.option(
        "--repo-path",
        envvar="KNOWLEDGE_REPO_PATH",
        type=click.Path(file_okay=False),
        default=".",
        help="Path to the git working tree",
    )(func)
    return func


def timezone_option(func):
    return click.option(
        "--timezone",
        "tz_name",
        envvar="KNOWLEDGE_TIMEZONE",
        default=DEFAULT_TIMEZONE,
        show_default=True,
        help="Timezone used for the entry heading",
    )(func)


def build_comment(body: Optional[str], url: Optional[str], timestamp: Optional[str]) -> Comment:
    """Check required comment inputs and build the Comment."""
    return Comment(
        body=require(body, "COMMENT_BODY"),
        url=require(url, "COMMENT_URL"),
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
    )


def report_failure(error: Exception) -> None:
    """Print an error and its traceback to stderr and exit with status 1."""
    err_console.print()
    err_console.print("[red]❌ Error:[/red]")
    err_console.print(f"  {escape(str(error))}")
    err_console.print()
    err_console.print("[bold]Traceback:[/bold]")
    err_console.print_exception()
    sys.exit(1)


@click.group()
@click.version_option(package_name="review-knowledge")
def main():
    """Review Knowledge - Collect [must] review comments into a policy document."""


@main.command()
@comment_options
@click.option("--branch", envvar="PR_BRANCH", help="Branch to push the commit to")
@click.option("--token", envvar="GITHUB_TOKEN", help="Token for HTTPS push")
@click.option(
    "--repository", envvar="GITHUB_REPOSITORY", help="owner/repo used with --token"
)
@click.option(
    "--identity-scope",
    envvar="KNOWLEDGE_IDENTITY_SCOPE",
    type=click.Choice(["global", "repository"]),
    default="global",
    show_default=True,
    help="git config level for the bot identity",
)
@location_options
@timezone_option
def append(
    body: Optional[str],
    url: Optional[str],
    timestamp: Optional[str],
    branch: Optional[str],
    token: Optional[str],
    repository: Optional[str],
    identity_scope: str,
    repo_path: str,
    target: str,
    tz_name: str,
):
    """Append a review comment to the policy document and push it."""
    console.print("🚀 Starting review knowledge automation")

    try:
        comment = build_comment(body, url, timestamp)
        branch = require(branch, "PR_BRANCH")
        settings = load_settings(
            repo_root=Path(repo_path),
            target_path=Path(target),
            timezone=tz_name,
            identity_scope=identity_scope,
            github_token=token,
            github_repository=repository,
        )

        console.print(f"[bold]Comment:[/bold] {escape(comment.url)}")
        console.print(f"[bold]Branch:[/bold] {escape(branch)}")
        console.print(f"[bold]Timestamp:[/bold] {escape(comment.timestamp)}")

        result = AppendCommitPipeline(settings, console=console).run(comment, branch)
    except Exception as e:
        report_failure(e)

    console.print(
        f"[green]🎉 Added knowledge to {result.target_path} "
        f"({result.commit_hash[:8]} on {escape(result.branch)})[/green]"
    )


@main.command()
@comment_options
@location_options
@timezone_option
def preview(
    body: Optional[str],
    url: Optional[str],
    timestamp: Optional[str],
    repo_path: str,
    target: str,
    tz_name: str,
):
    """Print the entry that would be appended, without writing anything."""
    try:
        comment = build_comment(body, url, timestamp)
        settings = load_settings(
            repo_root=Path(repo_path), target_path=Path(target), timezone=tz_name
        )
        content = AppendCommitPipeline(settings, console=err_console).render(comment)
    except KnowledgeError as e:
        report_failure(e)

    click.echo(content, nl=False)


@main.command()
@location_options
def show(repo_path: str, target: str):
    """Show the current policy document."""
    settings = Settings(repo_root=Path(repo_path), target_path=Path(target))

    try:
        result = read_file(settings.target_file)
    except KnowledgeError as e:
        report_failure(e)

    if not result.exists:
        console.print(f"[yellow]No knowledge recorded yet: {settings.target_path}[/yellow]")
        return

    click.echo(result.content, nl=False)


if __name__ == "__main__":
    main()
