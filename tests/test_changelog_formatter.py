"""Unit tests for commit classification, prefix stripping and rendering."""

from datetime import date

import pytest

from utils.changelog_formatter import build_report, classify, match_rule, render, strip_type_prefix
from utils.changelog_models import DEFAULT_RULES, CategoryRule


RELEASE_DAY = date(2024, 3, 15)

EXAMPLE_COMMITS = [
    "feat(parser): add CSV support",
    "fix(cli): handle missing file",
    "chore: bump deps",
    "refactor(core): simplify loop",
    "docs(readme): add usage",
]


def _rule(title):
    return next(r for r in DEFAULT_RULES if r.title == title)


class TestMatchRule:

    @pytest.mark.parametrize("subject,title", [
        ("feat: x", "Added"),
        ("fix(api): x", "Fixed"),
        ("improve: x", "Changed"),
        ("refactor: x", "Changed"),
        ("perf(db): x", "Changed"),
        ("docs: x", "Documentation"),
        ("security: x", "Security"),
        ("feat!: breaking x", "Added"),
        ("fix typo", "Fixed"),
    ])
    def test_matches_leading_token(self, subject, title):
        assert match_rule(subject).title == title

    @pytest.mark.parametrize("subject", [
        "chore: bump deps",
        "Merge branch 'main' into dev",
        "Feat: capitalised",
        "feature: longer word",
        "update docs: not leading",
        "feat-flag: hyphenated word",
        "fixup! squash me",
    ])
    def test_no_match(self, subject):
        assert match_rule(subject) is None

    def test_first_declared_rule_wins(self):
        rules = (
            CategoryRule(types=("fix",), title="First"),
            CategoryRule(types=("fix",), title="Second"),
        )
        assert match_rule("fix: x", rules).title == "First"


class TestStripTypePrefix:

    def test_scope_is_kept(self):
        assert strip_type_prefix("feat(parser): add CSV support", _rule("Added")) == "parser: add CSV support"

    def test_no_scope(self):
        assert strip_type_prefix("fix: handle missing file", _rule("Fixed")) == "handle missing file"

    def test_empty_scope_behaves_like_no_scope(self):
        assert strip_type_prefix("docs(): tidy", _rule("Documentation")) == "tidy"

    def test_breaking_marker_removed(self):
        assert strip_type_prefix("feat(api)!: drop v1", _rule("Added")) == "api: drop v1"
        assert strip_type_prefix("feat!: drop v1", _rule("Added")) == "drop v1"

    def test_missing_colon_drops_token_only(self):
        assert strip_type_prefix("fix typo in header", _rule("Fixed")) == "typo in header"

    def test_alias_tokens_all_stripped(self):
        rule = _rule("Changed")
        assert strip_type_prefix("improve(ui): faster", rule) == "ui: faster"
        assert strip_type_prefix("perf: cache lookups", rule) == "cache lookups"

    def test_rest_of_subject_untouched(self):
        subject = "fix(cli): handle feat(x): nested text"
        assert strip_type_prefix(subject, _rule("Fixed")) == "cli: handle feat(x): nested text"

    def test_space_before_colon(self):
        assert strip_type_prefix("fix : spaced", _rule("Fixed")) == "spaced"
        assert strip_type_prefix("docs(api) : x", _rule("Documentation")) == "api: x"
        assert strip_type_prefix("feat ! : breaking", _rule("Added")) == "breaking"

    def test_nested_parentheses_in_scope(self):
        assert strip_type_prefix("fix(a(b)): x", _rule("Fixed")) == "a(b): x"

    def test_classify_spaced_separators(self):
        sections = classify(["fix : spaced", "docs(api) : x", "feat-flag: x"])
        assert sections["Fixed"] == ["spaced"]
        assert sections["Documentation"] == ["api: x"]
        assert sections["Added"] == []


class TestClassify:

    def test_example_partition(self):
        sections = classify(EXAMPLE_COMMITS)
        assert sections == {
            "Added": ["parser: add CSV support"],
            "Fixed": ["cli: handle missing file"],
            "Changed": ["core: simplify loop"],
            "Documentation": ["readme: add usage"],
            "Security": [],
        }

    def test_aliases_merge_in_commit_order(self):
        sections = classify(["perf: b", "refactor: a", "improve: c"])
        assert sections["Changed"] == ["b", "a", "c"]

    def test_unmatched_and_blank_lines_dropped(self):
        sections = classify(["", "   ", "chore: x", "Merge pull request #1"])
        assert all(entries == [] for entries in sections.values())

    def test_each_commit_lands_once(self):
        commits = ["feat: a", "fix: b", "feat: c", "security: d"]
        sections = classify(commits)
        assert sum(len(v) for v in sections.values()) == len(commits)
        assert sections["Added"] == ["a", "c"]


class TestRender:

    def test_example_output(self):
        text = render("1.2.0", classify(EXAMPLE_COMMITS), RELEASE_DAY)
        assert text == (
            "## [1.2.0] - 2024-03-15\n"
            "### Added\n"
            "- parser: add CSV support\n"
            "### Fixed\n"
            "- cli: handle missing file\n"
            "### Changed\n"
            "- core: simplify loop\n"
            "### Documentation\n"
            "- readme: add usage\n"
        )

    def test_header_only_when_nothing_matches(self):
        assert render("2.0.0", classify(["chore: x"]), RELEASE_DAY) == "## [2.0.0] - 2024-03-15\n"

    def test_empty_sections_never_rendered(self):
        text = render("1.0.0", classify(["security: patch CVE"]), RELEASE_DAY)
        assert "### Security" in text
        for title in ("Added", "Fixed", "Changed", "Documentation"):
            assert f"### {title}" not in text

    def test_rendering_is_repeatable(self):
        first = render("1.2.0", classify(EXAMPLE_COMMITS), RELEASE_DAY)
        second = render("1.2.0", classify(EXAMPLE_COMMITS), RELEASE_DAY)
        assert first == second

    def test_defaults_to_today(self):
        report = build_report("1.0.0", {"Added": ["x"]})
        assert report.release_date == date.today()

    def test_report_keeps_only_non_empty_sections(self):
        report = build_report("1.0.0", classify(EXAMPLE_COMMITS), RELEASE_DAY)
        assert [s.title for s in report.sections] == ["Added", "Fixed", "Changed", "Documentation"]
        assert report.header == "## [1.0.0] - 2024-03-15"
