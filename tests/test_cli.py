"""Tests for the review-knowledge command line."""

import tempfile
from pathlib import Path

import pytest
from click.testing import CliRunner
from git import Repo

from review_knowledge.cli.main import main

# Keep the invoking environment's CI variables out of the tests
CLEAN_ENV = {
    "COMMENT_BODY": None,
    "COMMENT_URL": None,
    "PR_BRANCH": None,
    "TIMESTAMP": None,
    "GITHUB_TOKEN": None,
    "GITHUB_REPOSITORY": None,
    "KNOWLEDGE_REPO_PATH": None,
    "KNOWLEDGE_TARGET": None,
    "KNOWLEDGE_TIMEZONE": None,
    "KNOWLEDGE_IDENTITY_SCOPE": None,
}


@pytest.fixture
def temp_git_project():
    """Create a project repository on feature/x with a bare origin."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir)
        remote_path = root / "remote.git"
        Repo.init(remote_path, bare=True)

        project_path = root / "project"
        main_repo = Repo.init(project_path)
        with main_repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        (project_path / "README.md").write_text("# Project\n")
        main_repo.index.add(["README.md"])
        main_repo.index.commit("Initial commit")
        main_repo.create_head("feature/x").checkout()
        main_repo.create_remote("origin", str(remote_path))

        yield project_path, remote_path


def make_env(project_path: Path, **overrides):
    env = dict(CLEAN_ENV)
    env.update(
        {
            "COMMENT_BODY": "[must] Use descriptive variable names.",
            "COMMENT_URL": "https://example.com/pr/1#c1",
            "PR_BRANCH": "feature/x",
            "TIMESTAMP": "2024-01-15T10:30:00Z",
            "KNOWLEDGE_REPO_PATH": str(project_path),
            "KNOWLEDGE_IDENTITY_SCOPE": "repository",
        }
    )
    env.update(overrides)
    return env


def test_append_from_environment(temp_git_project):
    """Test the CI entry point driven entirely by environment variables."""
    project_path, remote_path = temp_git_project
    runner = CliRunner()

    result = runner.invoke(main, ["append"], env=make_env(project_path))

    assert result.exit_code == 0, result.output
    content = (project_path / "agents" / "policy.md").read_text(encoding="utf-8")
    assert "\nUse descriptive variable names.\n" in content
    assert "出典: https://example.com/pr/1#c1\n" in content

    remote_head = Repo(remote_path).rev_parse("refs/heads/feature/x")
    assert remote_head.hexsha == Repo(project_path).head.commit.hexsha


def test_append_options_override_environment(temp_git_project):
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(
        main,
        ["append", "--target", "docs/rules.md", "--timezone", "UTC"],
        env=make_env(project_path),
    )

    assert result.exit_code == 0, result.output
    content = (project_path / "docs" / "rules.md").read_text(encoding="utf-8")
    assert "## [追加日時: 2024/01/15 10:30:00]" in content


def test_empty_body_exits_with_error(temp_git_project):
    """Test that an empty COMMENT_BODY fails without touching the file."""
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(main, ["append"], env=make_env(project_path, COMMENT_BODY=""))

    assert result.exit_code == 1
    assert "COMMENT_BODY" in result.output
    assert not (project_path / "agents" / "policy.md").exists()


@pytest.mark.parametrize("missing", ["COMMENT_URL", "PR_BRANCH"])
def test_missing_required_variable(temp_git_project, missing):
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(main, ["append"], env=make_env(project_path, **{missing: None}))

    assert result.exit_code == 1
    assert f"{missing} is not set" in result.output
    assert not (project_path / "agents" / "policy.md").exists()


def test_token_without_repository_exits_with_error(temp_git_project):
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(
        main, ["append"], env=make_env(project_path, GITHUB_TOKEN="ghs_secret")
    )

    assert result.exit_code == 1
    assert "GITHUB_REPOSITORY" in result.output
    assert not (project_path / "agents" / "policy.md").exists()


def test_git_failure_exits_with_error_and_keeps_append(temp_git_project):
    """Test that a push failure exits 1 and leaves the appended entry."""
    project_path, _ = temp_git_project
    Repo(project_path).delete_remote("origin")
    runner = CliRunner()

    result = runner.invoke(main, ["append"], env=make_env(project_path))

    assert result.exit_code == 1
    assert "does not exist" in result.output
    content = (project_path / "agents" / "policy.md").read_text(encoding="utf-8")
    assert "Use descriptive variable names." in content


def test_preview_prints_block_without_writing(temp_git_project):
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(main, ["preview", "--timezone", "UTC"], env=make_env(project_path))

    assert result.exit_code == 0, result.output
    assert "## [追加日時: 2024/01/15 10:30:00]\n出典: https://example.com/pr/1#c1\n" in result.output
    assert not (project_path / "agents" / "policy.md").exists()


def test_show_missing_document(temp_git_project):
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(main, ["show"], env=make_env(project_path))

    assert result.exit_code == 0
    assert "No knowledge recorded yet" in result.output


def test_show_existing_document(temp_git_project):
    project_path, _ = temp_git_project
    policy = project_path / "agents" / "policy.md"
    policy.parent.mkdir()
    policy.write_text("# Policy\n\n- existing rule\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(main, ["show"], env=make_env(project_path))

    assert result.exit_code == 0
    assert result.output == "# Policy\n\n- existing rule\n"


def test_target_outside_repository_exits_without_writing(temp_git_project):
    """Test that --target escaping the repository fails before appending."""
    project_path, _ = temp_git_project
    runner = CliRunner()

    result = runner.invoke(
        main, ["append", "--target", "../outside.md"], env=make_env(project_path)
    )

    assert result.exit_code == 1
    assert "outside the repository" in result.output
    assert not (project_path.parent / "outside.md").exists()
