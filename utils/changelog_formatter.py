#!/usr/bin/env python3
"""Group conventional-commit subjects into changelog sections and render them."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from utils.changelog_models import DEFAULT_RULES, CategoryRule, ChangelogReport, ChangelogSection

logger = logging.getLogger(__name__)

# Scope text, allowing one level of nested parentheses: a(b)
_SCOPE = r"(?:[^()]|\([^()]*\))*"


def _type_token_re(rule: CategoryRule) -> "re.Pattern[str]":
	# A token ends at a scope, breaking marker, colon, whitespace or end of subject.
	return re.compile(rf"(?:{rule.alternation})(?=[(!:\s]|\Z)")


def _scoped_re(rule: CategoryRule) -> "re.Pattern[str]":
	# type(scope)!: rest
	return re.compile(rf"(?:{rule.alternation})\(({_SCOPE})\)\s*!?\s*:(.*)\Z", re.DOTALL)


def _plain_re(rule: CategoryRule) -> "re.Pattern[str]":
	# type!: rest
	return re.compile(rf"(?:{rule.alternation})\s*!?\s*:\s*(.*)\Z", re.DOTALL)


def match_rule(subject: str, rules: Sequence[CategoryRule] = DEFAULT_RULES) -> Optional[CategoryRule]:
	"""Return the first rule whose type token starts ``subject``, or None."""
	for rule in rules:
		if _type_token_re(rule).match(subject):
			return rule
	return None


def strip_type_prefix(subject: str, rule: CategoryRule) -> str:
	"""Remove the type token (and scope parentheses) that ``rule`` matched.

	``feat(parser): add x`` -> ``parser: add x``
	``feat: add x`` -> ``add x``
	``fix typo`` -> ``typo``
	"""
	m = _scoped_re(rule).match(subject)
	if m and m.group(1).strip():
		return f"{m.group(1).strip()}:{m.group(2)}"
	if m:
		return m.group(2).lstrip()
	m = _plain_re(rule).match(subject)
	if m:
		return m.group(1)
	return _type_token_re(rule).sub("", subject, count=1).lstrip()


def classify(commit_lines: Iterable[str], rules: Sequence[CategoryRule] = DEFAULT_RULES) -> Dict[str, List[str]]:
	"""Partition commit subjects by section title.

	Every title in ``rules`` is present in the result, in rule order, even
	when empty. Input order is preserved inside each section; subjects that
	match no rule are dropped.
	"""
	sections: Dict[str, List[str]] = {rule.title: [] for rule in rules}
	dropped = 0
	for raw in commit_lines:
		subject = (raw or "").strip()
		if not subject:
			continue
		rule = match_rule(subject, rules)
		if rule is None:
			dropped += 1
			logger.debug(f"Skipping non-conventional commit: {subject[:60]}")
			continue
		sections[rule.title].append(strip_type_prefix(subject, rule))
	if dropped:
		logger.info(f"Dropped {dropped} commit(s) matching no category")
	return sections


def build_report(version: str, sections: Dict[str, List[str]], release_date: Optional[date] = None) -> ChangelogReport:
	"""Assemble a report keeping only the non-empty sections, in mapping order."""
	return ChangelogReport(
		version=version,
		release_date=release_date or date.today(),
		sections=[ChangelogSection(title=title, entries=list(entries)) for title, entries in sections.items() if entries],
	)


def render(version: str, sections: Dict[str, List[str]], release_date: Optional[date] = None) -> str:
	return build_report(version, sections, release_date).to_markdown()
