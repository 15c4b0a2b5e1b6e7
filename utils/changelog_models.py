#!/usr/bin/env python3
"""Changelog models: category rules, sections and the rendered report.

The rule table is ordered; classification walks it top to bottom and the
first matching rule wins.
"""
import re
from datetime import date
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, constr


class _StrictModel(BaseModel):
	model_config = ConfigDict(extra="forbid", frozen=True)


class CategoryRule(_StrictModel):
	"""Maps one or more conventional-commit type tokens to a section title."""

	types: Tuple[constr(pattern=r"^[a-z]+$"), ...] = Field(..., min_length=1)
	title: constr(min_length=1, max_length=50)

	@property
	def alternation(self) -> str:
		return "|".join(re.escape(t) for t in self.types)


DEFAULT_RULES: Tuple[CategoryRule, ...] = (
	CategoryRule(types=("feat",), title="Added"),
	CategoryRule(types=("fix",), title="Fixed"),
	CategoryRule(types=("improve", "refactor", "perf"), title="Changed"),
	CategoryRule(types=("docs",), title="Documentation"),
	CategoryRule(types=("security",), title="Security"),
)


class ChangelogSection(_StrictModel):
	"""One rendered heading and its entries, in input commit order."""

	title: str
	entries: List[str] = Field(default_factory=list)


class ChangelogReport(_StrictModel):
	"""Version header plus the non-empty sections, in rule order."""

	version: constr(min_length=1)
	release_date: date
	sections: List[ChangelogSection] = Field(default_factory=list)

	@property
	def header(self) -> str:
		return f"## [{self.version}] - {self.release_date.isoformat()}"

	def to_markdown(self) -> str:
		lines = [self.header]
		for section in self.sections:
			lines.append(f"### {section.title}")
			lines.extend(f"- {entry}" for entry in section.entries)
		return "\n".join(lines) + "\n"
