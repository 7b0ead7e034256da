"""Tests for keyword loading functionality."""

import pytest
from pathlib import Path

from resume_refiner.keyword_loader import (
    KeywordLoadError,
    load_keywords,
    load_keywords_from_csv,
    load_keywords_from_excel,
    load_keywords_from_text,
    parse_keyword_list,
)


class TestLoadKeywordsFromCSV:
    """Tests for CSV keyword loading."""

    def test_load_valid_csv(self, sample_keywords_csv: Path):
        """Test loading a valid CSV file."""
        keywords = load_keywords_from_csv(sample_keywords_csv)

        assert keywords == ["SaaS", "retention", "Power BI"]

    def test_column_name_variants(self, tmp_path: Path):
        """Test that 'Terms' and similar headers are recognized."""
        csv_path = tmp_path / "terms.csv"
        csv_path.write_text("Count,Terms\n3,Docker\n1,  CI/CD  \n2,\n")

        assert load_keywords_from_csv(csv_path) == ["Docker", "CI/CD"]

    def test_load_nonexistent_csv(self, tmp_path: Path):
        """Test loading a non-existent file raises error."""
        with pytest.raises(KeywordLoadError, match="File not found"):
            load_keywords_from_csv(tmp_path / "nonexistent.csv")

    def test_load_csv_without_keyword_column(self, tmp_path: Path):
        """Test loading CSV without required keyword column."""
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("volume,difficulty\n100,50\n200,60")

        with pytest.raises(KeywordLoadError, match="No keyword column found"):
            load_keywords_from_csv(csv_path)

    def test_load_empty_csv(self, tmp_path: Path):
        """Test loading CSV with only a header raises error."""
        csv_path = tmp_path / "empty.csv"
        csv_path.write_text("keyword\n")

        with pytest.raises(KeywordLoadError, match="Keyword file is empty"):
            load_keywords_from_csv(csv_path)

    def test_load_blank_csv(self, tmp_path: Path):
        """Test loading a zero-byte CSV raises error."""
        csv_path = tmp_path / "blank.csv"
        csv_path.write_text("")

        with pytest.raises(KeywordLoadError, match="Keyword file is empty"):
            load_keywords_from_csv(csv_path)

    def test_latin1_fallback(self, tmp_path: Path):
        """Test that non-UTF-8 files are read as latin-1."""
        csv_path = tmp_path / "latin.csv"
        csv_path.write_bytes("keyword\nCaf\xe9 operations\n".encode("latin-1"))

        assert load_keywords_from_csv(csv_path) == ["Caf\xe9 operations"]


class TestLoadKeywordsFromExcel:
    """Tests for Excel keyword loading."""

    def test_load_valid_excel(self, sample_keywords_excel: Path):
        """Test loading a valid Excel file."""
        keywords = load_keywords_from_excel(sample_keywords_excel)

        assert keywords == ["Tableau", "SQL", "Stakeholder management"]

    def test_load_nonexistent_excel(self, tmp_path: Path):
        """Test loading non-existent Excel file."""
        with pytest.raises(KeywordLoadError, match="File not found"):
            load_keywords_from_excel(tmp_path / "nonexistent.xlsx")


class TestLoadKeywordsFromText:
    """Tests for plain text keyword loading."""

    def test_lines_and_commas(self, tmp_path: Path):
        txt_path = tmp_path / "keywords.txt"
        txt_path.write_text("SaaS, retention\n\nPower BI\n")

        assert load_keywords_from_text(txt_path) == ["SaaS", "retention", "Power BI"]

    def test_empty_text_file(self, tmp_path: Path):
        txt_path = tmp_path / "keywords.txt"
        txt_path.write_text("\n , \n")

        with pytest.raises(KeywordLoadError, match="Keyword file is empty"):
            load_keywords_from_text(txt_path)


class TestLoadKeywords:
    """Tests for the generic load_keywords function."""

    def test_auto_detect_csv(self, sample_keywords_csv: Path):
        """Test auto-detection of CSV format."""
        assert load_keywords(sample_keywords_csv) == ["SaaS", "retention", "Power BI"]

    def test_auto_detect_excel(self, sample_keywords_excel: Path):
        """Test auto-detection of Excel format."""
        assert len(load_keywords(sample_keywords_excel)) == 3

    def test_auto_detect_text(self, tmp_path: Path):
        txt_path = tmp_path / "keywords.txt"
        txt_path.write_text("Docker\nKubernetes")

        assert load_keywords(txt_path) == ["Docker", "Kubernetes"]

    def test_unsupported_format(self, tmp_path: Path):
        """Test loading unsupported format raises error."""
        json_path = tmp_path / "keywords.json"
        json_path.write_text('["SaaS"]')

        with pytest.raises(KeywordLoadError, match="Unsupported file format"):
            load_keywords(json_path)


class TestParseKeywordList:
    """Tests for parse_keyword_list."""

    def test_separators(self):
        assert parse_keyword_list("SaaS, retention; Power BI\nSQL") == [
            "SaaS",
            "retention",
            "Power BI",
            "SQL",
        ]

    def test_empty(self):
        assert parse_keyword_list("") == []
        assert parse_keyword_list(None) == []
