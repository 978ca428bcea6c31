"""Run configuration, built once at start-up and passed to each component."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from review_knowledge.core.formatter import DEFAULT_TIMEZONE
from review_knowledge.core.git_publisher import BOT_EMAIL, BOT_NAME, DEFAULT_REMOTE
from review_knowledge.errors import ValidationError

DEFAULT_TARGET = Path("agents/policy.md")


class Settings(BaseModel):
    """Where the policy document lives and how changes are published."""

    repo_root: Path = Path(".")
    target_path: Path = DEFAULT_TARGET
    timezone: str = DEFAULT_TIMEZONE
    bot_name: str = BOT_NAME
    bot_email: str = BOT_EMAIL
    identity_scope: Literal["global", "repository"] = "global"
    remote_name: str = DEFAULT_REMOTE
    github_host: str = "github.com"
    github_token: Optional[str] = Field(default=None, repr=False)
    github_repository: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def target_file(self) -> Path:
        """Absolute location of the policy document."""
        return self.repo_root / self.target_path


def require(value: Optional[str], name: str) -> str:
    """Return ``value`` or raise if it is missing or blank."""
    if value is None or not value.strip():
        raise ValidationError(f"{name} is not set")
    return value


def load_settings(
    repo_root: Path = Path("."),
    target_path: Path = DEFAULT_TARGET,
    timezone: str = DEFAULT_TIMEZONE,
    identity_scope: str = "global",
    github_token: Optional[str] = None,
    github_repository: Optional[str] = None,
) -> Settings:
    """Build validated settings from CLI options and environment variables.

    Raises:
        ValidationError: If a token is given without a repository slug, or
            the target path points outside the working tree.
    """
    repo_root = Path(repo_root).resolve()
    if not (repo_root / target_path).resolve().is_relative_to(repo_root):
        raise ValidationError(f"Target {target_path} is outside the repository at {repo_root}")

    github_token = github_token or None
    github_repository = github_repository or None

    if github_token and not github_repository:
        raise ValidationError("GITHUB_REPOSITORY is required when GITHUB_TOKEN is set")

    return Settings(
        repo_root=repo_root,
        target_path=Path(target_path),
        timezone=timezone,
        identity_scope=identity_scope,
        github_token=github_token,
        github_repository=github_repository,
    )
