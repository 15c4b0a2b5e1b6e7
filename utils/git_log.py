#!/usr/bin/env python3
"""Commit subject source backed by the local git history.

Thin wrapper around the ``git`` binary: find the previous release tag,
derive the commit range since it, and list the subjects in that range.
"""

import logging
import subprocess
from typing import IO, List, Optional

from configs.config import Config

# Set up logging
logger = logging.getLogger(__name__)


class GitLogError(Exception):
    """Raised when a git query fails, with a typed code for friendly handling."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


def extract_first_line(message: str) -> str:
    """Extract the first line of a commit message, stripped of whitespace."""
    if not message:
        return ""
    lines = message.splitlines()
    return lines[0].strip() if lines else ""


def read_commit_lines(stream: IO[str]) -> List[str]:
    """Read pre-computed commit subjects, one per line, skipping blanks."""
    subjects = []
    for raw in stream:
        line = extract_first_line(raw)
        if line:
            subjects.append(line)
    return subjects


class GitCommitLog:
    """Reads tags and commit subjects from a git working copy."""

    def __init__(self, repo_dir: str = ".", git_bin: Optional[str] = None, timeout_s: Optional[int] = None):
        """Initialize the commit log source.

        Args:
            repo_dir: Directory inside the git working copy
            git_bin: Git executable (defaults to Config.GIT_BIN)
            timeout_s: Per-command timeout in seconds (defaults to Config.GIT_TIMEOUT_S)
        """
        git_config = Config.get_git_config()
        self.repo_dir = repo_dir
        self.git_bin = git_bin or git_config["git_bin"]
        self.timeout_s = timeout_s or git_config["timeout_s"]

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.git_bin, *args]
        logger.debug(f"Running {' '.join(cmd)} in {self.repo_dir}")
        try:
            return subprocess.run(
                cmd,
                cwd=self.repo_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitLogError(f"Git executable not found: {self.git_bin}", code="GIT_NOT_FOUND") from e
        except subprocess.TimeoutExpired as e:
            raise GitLogError(f"Git command timed out after {self.timeout_s}s: {' '.join(cmd)}", code="GIT_TIMEOUT") from e

    def previous_tag(self) -> Optional[str]:
        """Return the most recent tag reachable from HEAD, or None if there is none."""
        result = self._run("describe", "--tags", "--abbrev=0")
        if result.returncode != 0:
            logger.info("No previous tag found; using full history")
            return None
        tag = result.stdout.strip()
        return tag or None

    def default_range(self, until: Optional[str] = None) -> str:
        """Return ``<previous tag>..<until>``, or just ``<until>`` when untagged."""
        until = until or Config.DEFAULT_UNTIL_REV
        tag = self.previous_tag()
        return f"{tag}..{until}" if tag else until

    def subjects(self, rev_range: str) -> List[str]:
        """List commit subjects for ``rev_range`` in the order git reports them.

        Raises:
            GitLogError: If git fails (unknown revision, not a repository, ...)
        """
        result = self._run("log", rev_range, "--pretty=format:%s")
        if result.returncode != 0:
            detail = extract_first_line(result.stderr) or f"exit status {result.returncode}"
            raise GitLogError(f"git log {rev_range} failed: {detail}", code="GIT_FAILED")
        subjects = [line for line in result.stdout.splitlines() if line.strip()]
        logger.debug(f"✓ Fetched {len(subjects)} commit subjects for {rev_range}")
        return subjects
