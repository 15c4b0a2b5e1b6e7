"""Shared fixtures for the changelog agent test suite."""

import shutil
import subprocess
from pathlib import Path

import pytest

from configs.config import Config


POM_TEXT = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
        <groupId>org.example</groupId>
        <artifactId>parent-pom</artifactId>
        <version>9.9.9</version>
    </parent>
    <groupId>com.heymumford</groupId>
    <artifactId>ftoc</artifactId>
    <version>1.2.0</version>
    <dependencies>
        <dependency>
            <groupId>junit</groupId>
            <artifactId>junit</artifactId>
            <version>4.13.2</version>
        </dependency>
    </dependencies>
</project>
"""


@pytest.fixture(autouse=True)
def metrics_root(tmp_path, monkeypatch):
    """Keep metrics output inside the test's temp directory."""
    root = tmp_path / "metrics"
    monkeypatch.setattr(Config, "METRICS_ROOT", str(root))
    monkeypatch.setattr(Config, "METRICS_ENABLED", True)
    return root


@pytest.fixture
def pom_text():
    return POM_TEXT


@pytest.fixture
def pom_file(tmp_path):
    path = tmp_path / "pom.xml"
    path.write_text(POM_TEXT, encoding="utf-8")
    return path


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True)


@pytest.fixture
def git_repo(tmp_path):
    """A throwaway repository with one tagged release and three later commits."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.email", "dev@example.com")
    _git(repo, "config", "user.name", "Dev")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "config", "tag.gpgsign", "false")

    def commit(message: str) -> None:
        _git(repo, "commit", "-q", "--allow-empty", "-m", message)

    commit("feat: initial import")
    _git(repo, "tag", "-a", "v1.1.0", "-m", "Version 1.1.0")
    commit("feat(parser): add CSV support")
    commit("chore: bump deps")
    commit("fix(cli): handle missing file")
    return repo
