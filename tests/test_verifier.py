"""Tests for keyword coverage verification."""

import pytest

from resume_refiner.models import CoverageResult, Document
from resume_refiner.verifier import (
    coverage,
    includes_keyword,
    keyword_pattern,
    keyword_variants,
    normalize_keyword,
)


class TestIncludesKeyword:
    """Tests for whole-word, case-insensitive matching."""

    def test_whole_word(self):
        assert includes_keyword("Senior Python developer", "Python")

    def test_partial_word_is_not_a_match(self):
        assert not includes_keyword("Pythonic code", "Python")

    def test_case_insensitive(self):
        assert includes_keyword("built a saas platform", "SaaS")

    def test_multi_word_tolerates_whitespace(self):
        assert includes_keyword("Dashboards in Power\n   BI", "Power BI")

    def test_keyword_whitespace_normalized(self):
        assert includes_keyword("Dashboards in Power BI", "  Power   BI ")

    @pytest.mark.parametrize("text,keyword", [
        ("Expert in C++ and Go", "C++"),
        ("Built CI/CD pipelines", "CI/CD"),
        ("Migrated to .NET 8", ".NET"),
        ("Owned A/B testing", "A/B testing"),
    ])
    def test_punctuated_keywords(self, text, keyword):
        assert includes_keyword(text, keyword)

    def test_excel_is_not_excellent(self):
        assert not includes_keyword("Excellent communicator", "Excel")

    @pytest.mark.parametrize("keyword", ["", "   ", None])
    def test_blank_keyword_never_present(self, keyword):
        assert not includes_keyword("anything at all", keyword)

    def test_none_text(self):
        assert not includes_keyword(None, "Python")

    def test_regex_characters_are_literal(self):
        assert not includes_keyword("Node.js", "Node?js")
        assert includes_keyword("Node.js developer", "Node.js")


class TestVariants:
    """Tests for optional near-literal variant matching."""

    def test_variants_off_by_default(self):
        assert not includes_keyword("Tools: Microsoft Excel", "MS Excel")

    def test_ms_excel_matches_microsoft_excel(self):
        assert includes_keyword("Tools: Microsoft Excel", "MS Excel", match_variants=True)

    def test_excel_matches_ms_excel(self):
        assert includes_keyword("Tools: MS Excel", "Excel", match_variants=True)

    def test_aws_equivalence(self):
        assert includes_keyword("Skills: AWS", "Amazon Web Services", match_variants=True)

    def test_powerbi_spelling(self):
        assert includes_keyword("PowerBI dashboards", "Power BI", match_variants=True)

    def test_variant_list(self):
        variants = keyword_variants("MS Excel")

        assert variants[0] == "MS Excel"
        assert {v.lower() for v in variants} == {"ms excel", "excel", "microsoft excel"}

    def test_variants_of_blank(self):
        assert keyword_variants("") == []

    def test_unknown_keyword_has_only_itself(self):
        assert keyword_variants("Terraform") == ["Terraform"]


class TestCoverage:
    """Tests for the coverage() partition."""

    def test_partition_preserves_order(self):
        result = coverage("SQL and Python daily", ["Rust", "Python", "Go", "SQL"])

        assert result.present == ("Python", "SQL")
        assert result.missing == ("Rust", "Go")

    def test_duplicates_kept(self):
        result = coverage("SQL", ["SQL", "sql", "Rust"])

        assert result.present == ("SQL", "sql")
        assert result.missing == ("Rust",)

    def test_blank_keywords_are_missing(self):
        result = coverage("text", ["", "  "])

        assert result.present == ()
        assert result.missing == ("", "  ")

    def test_document_input(self):
        doc = Document.from_markdown("## SKILLS\nPython, Docker")
        result = coverage(doc, ["Docker", "Kubernetes"])

        assert result.present == ("Docker",)
        assert result.missing == ("Kubernetes",)

    def test_empty_keywords(self):
        result = coverage("anything", [])

        assert result == CoverageResult()
        assert result.ratio == 1.0
        assert result.is_complete

    @pytest.mark.parametrize("text,keywords", [
        ("", ["a", "b"]),
        ("Power BI and SQL", ["power bi", "SQL", "Tableau", ""]),
        ("C++ / Rust", ["C++", "C", "Rust", "rust", "Go"]),
        ("Pythonic", ["Python", "Pythonic"]),
    ])
    def test_partition_is_complete(self, text, keywords):
        """Every keyword lands in exactly one partition."""
        result = coverage(text, keywords)

        assert sorted(result.present + result.missing) == sorted(keywords)
        assert list(result.keywords) == [k for k in keywords if k in result.present] + [
            k for k in keywords if k in result.missing
        ]

    def test_variants_flag(self):
        result = coverage("Microsoft Excel", ["MS Excel"], match_variants=True)
        assert result.present == ("MS Excel",)


class TestKeywordHelpers:
    """Tests for normalize_keyword and keyword_pattern."""

    def test_normalize_dashes_and_space(self):
        assert normalize_keyword(" end—to–end   testing ") == "end-to-end testing"

    def test_pattern_is_cached(self):
        assert keyword_pattern("Python") is keyword_pattern("Python")
