#!/usr/bin/env python3
"""Changelog agent for conventional-commit release sections.

Resolves the release version from the project manifest, collects commit
subjects since the previous tag, and prints a grouped changelog entry.
"""

import argparse
import logging
import sys
from datetime import date
from typing import Iterable, List, Optional, Sequence

from dotenv import load_dotenv

# Load environment variables from .env file before Config is read
load_dotenv()

from configs.config import Config  # noqa: E402
from utils import metrics  # noqa: E402
from utils.changelog_formatter import build_report, classify  # noqa: E402
from utils.changelog_models import DEFAULT_RULES, CategoryRule, ChangelogReport  # noqa: E402
from utils.git_log import GitCommitLog, GitLogError, read_commit_lines  # noqa: E402
from utils.version_resolver import VersionNotFound, resolve_version  # noqa: E402

# Set up logging
logger = logging.getLogger(__name__)


class ChangelogAgent:
	"""Agent turning a manifest and a commit range into a changelog entry."""

	def __init__(self, commit_source: Optional[GitCommitLog] = None, rules: Sequence[CategoryRule] = DEFAULT_RULES):
		"""Initialize the changelog agent.

		Args:
			commit_source: Optional GitCommitLog. Created lazily when commits
				must be read from git.
			rules: Ordered category rules, first match wins.
		"""
		self._commit_source = commit_source
		self.rules = tuple(rules)

	@property
	def commit_source(self) -> GitCommitLog:
		if self._commit_source is None:
			self._commit_source = GitCommitLog()
		return self._commit_source

	def collect_commits(self, rev_range: Optional[str] = None, until: Optional[str] = None) -> List[str]:
		"""Return commit subjects for ``rev_range`` or, if omitted, since the previous tag."""
		rev_range = rev_range or self.commit_source.default_range(until)
		logger.info(f"Collecting commits for range {rev_range}")
		return self.commit_source.subjects(rev_range)

	def generate(
		self,
		manifest_text: str,
		commit_lines: Optional[Iterable[str]] = None,
		*,
		rev_range: Optional[str] = None,
		until: Optional[str] = None,
		artifact_id: Optional[str] = None,
		release_date: Optional[date] = None,
		version: Optional[str] = None,
	) -> ChangelogReport:
		"""Build the changelog report.

		The version is resolved before any commit is read, so a manifest
		without a version never produces output. Pass ``version`` when it
		has already been resolved from ``manifest_text``.

		Raises:
			VersionNotFound: If the manifest lacks the identifier/version pair
			GitLogError: If commits must be read from git and that fails
		"""
		if version is None:
			version = resolve_version(manifest_text, artifact_id=artifact_id)
		logger.info(f"Resolved release version {version}")

		if commit_lines is None:
			commit_lines = self.collect_commits(rev_range, until)
		commit_lines = list(commit_lines)

		with metrics.Timer("changelog.generate"):
			sections = classify(commit_lines, self.rules)
			report = build_report(version, sections, release_date)

		kept = sum(len(entries) for entries in sections.values())
		total = sum(1 for line in commit_lines if line and line.strip())
		metrics.incr("changelog.commits_total", total)
		metrics.incr("changelog.commits_dropped", total - kept)
		metrics.incr_each("changelog.section_entries", {s.title: len(s.entries) for s in report.sections}, label="section")

		logger.info(f"✓ Changelog for {version}: {kept} of {total} commits in {len(report.sections)} sections")
		return report


def _read_manifest(path: str) -> str:
	with open(path, "r", encoding="utf-8") as f:
		return f.read()


def _read_commits_file(path: str) -> List[str]:
	if path == "-":
		return read_commit_lines(sys.stdin)
	with open(path, "r", encoding="utf-8") as f:
		return read_commit_lines(f)


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		description="Changelog Agent - Generate a changelog entry from conventional commits",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.changelog_agent
  python -m agents.changelog_agent --since v1.1.0 --manifest pom.xml
  git log v1.1.0..HEAD --pretty=format:%s | python -m agents.changelog_agent --commits-file -
		"""
	)
	manifest_config = Config.get_manifest_config()
	parser.add_argument("--manifest", default=manifest_config["path"], help="Manifest file declaring the version (default: %(default)s)")
	parser.add_argument("--artifact-id", default=None, help="Project artifactId to anchor on (default: Config.ARTIFACT_ID)")
	parser.add_argument("--since", default=None, help="Start revision (exclusive); defaults to the previous tag")
	parser.add_argument("--until", default=None, help="End revision (default: HEAD)")
	parser.add_argument("--commits-file", default=None, help="Read commit subjects from a file ('-' for stdin) instead of git")
	parser.add_argument("--repo-dir", default=".", help="Git working copy to read history from")
	parser.add_argument("--date", type=date.fromisoformat, default=None, help="Release date YYYY-MM-DD (default: today)")
	parser.add_argument("--json", action="store_true", help="Output the report as JSON instead of Markdown")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
	return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
	"""CLI entry point for the changelog agent."""
	parser = build_parser()
	args = parser.parse_args(argv)

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from helpers unless in debug mode
	if not args.verbose:
		logging.getLogger("utils.git_log").setLevel(logging.WARNING)
		logging.getLogger("utils.changelog_formatter").setLevel(logging.WARNING)

	try:
		manifest_text = _read_manifest(args.manifest)
	except OSError as e:
		print(f"Error: Could not read manifest {args.manifest}: {e.strerror or e}", file=sys.stderr)
		sys.exit(1)

	# Resolve the version first: nothing else runs without it.
	try:
		version = resolve_version(manifest_text, artifact_id=args.artifact_id)
	except VersionNotFound as e:
		logger.error(f"Version resolution failed [{e.code}]")
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)

	commit_lines = None
	if args.commits_file:
		try:
			commit_lines = _read_commits_file(args.commits_file)
		except OSError as e:
			print(f"Error: Could not read commits file {args.commits_file}: {e.strerror or e}", file=sys.stderr)
			sys.exit(1)

	rev_range = None
	if args.since:
		rev_range = f"{args.since}..{args.until or Config.DEFAULT_UNTIL_REV}"

	agent = ChangelogAgent(commit_source=GitCommitLog(repo_dir=args.repo_dir))
	try:
		report = agent.generate(
			manifest_text,
			commit_lines,
			rev_range=rev_range,
			until=args.until,
			artifact_id=args.artifact_id,
			release_date=args.date,
			version=version,
		)
	except GitLogError as e:
		logger.error(f"Commit log query failed [{e.code}]")
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)

	if args.json:
		print(report.model_dump_json(indent=2))
	else:
		sys.stdout.write(report.to_markdown())
	sys.exit(0)


if __name__ == "__main__":
	main()
