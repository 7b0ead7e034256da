"""
Target keyword loading from files and command-line strings.

This module handles ingestion of keyword lists from:
- CSV files
- Excel files (.xlsx, .xls)
- Plain text files (one keyword per line, or comma-separated)
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)


class KeywordLoadError(Exception):
    """Raised when keyword loading fails."""
    pass


# Common column name variations for keyword data
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "term", "terms", "skill", "skills", "phrase"]


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Args:
        df: The DataFrame to search.
        variants: List of possible column name variants.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        normalized = _normalize_column_name(variant)
        if normalized in normalized_columns:
            return normalized_columns[normalized]

    return None


def parse_keyword_list(text: str) -> list[str]:
    """
    Split a keyword string on newlines, commas and semicolons.

    Args:
        text: e.g. "SaaS, retention; Power BI".

    Returns:
        Trimmed, non-empty keywords in input order.
    """
    return [part.strip() for part in re.split(r"[\n,;]", text or "") if part.strip()]


def _parse_keyword_dataframe(df: pd.DataFrame) -> list[str]:
    """
    Extract the keyword column of a DataFrame.

    Raises:
        KeywordLoadError: If the frame is empty or has no keyword column.
    """
    if df.empty:
        raise KeywordLoadError("Keyword file is empty")

    keyword_col = _find_column(df, KEYWORD_COLUMN_VARIANTS)
    if keyword_col is None:
        raise KeywordLoadError(
            f"No keyword column found. Expected one of: {', '.join(KEYWORD_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(col) for col in df.columns)}"
        )

    keywords = [
        str(value).strip()
        for value in df[keyword_col]
        if not pd.isna(value) and str(value).strip()
    ]

    if not keywords:
        raise KeywordLoadError("No valid keywords found in file")

    return keywords


def load_keywords_from_csv(file_path: Union[str, Path]) -> list[str]:
    """
    Load keywords from a CSV file.

    Args:
        file_path: Path to the CSV file.

    Returns:
        List of keywords.

    Raises:
        KeywordLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(path, encoding="utf-8")
    except UnicodeDecodeError:
        # Try alternative encoding
        try:
            df = pd.read_csv(path, encoding="latin-1")
        except Exception as e:
            raise KeywordLoadError(f"Failed to read CSV file: {e}")
    except pd.errors.EmptyDataError:
        raise KeywordLoadError("Keyword file is empty")
    except Exception as e:
        raise KeywordLoadError(f"Failed to read CSV file: {e}")

    return _parse_keyword_dataframe(df)


def load_keywords_from_excel(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[str]:
    """
    Load keywords from an Excel file.

    Args:
        file_path: Path to the Excel file (.xlsx or .xls).
        sheet_name: Optional sheet name to read from. Defaults to first sheet.

    Returns:
        List of keywords.

    Raises:
        KeywordLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    try:
        if sheet_name:
            df = pd.read_excel(path, sheet_name=sheet_name)
        else:
            df = pd.read_excel(path)
    except Exception as e:
        raise KeywordLoadError(f"Failed to read Excel file: {e}")

    return _parse_keyword_dataframe(df)


def load_keywords_from_text(file_path: Union[str, Path]) -> list[str]:
    """Load keywords from a text file (lines and/or comma-separated)."""
    path = Path(file_path)

    if not path.exists():
        raise KeywordLoadError(f"File not found: {file_path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise KeywordLoadError(f"Failed to read text file: {e}")

    keywords = parse_keyword_list(text)
    if not keywords:
        raise KeywordLoadError("Keyword file is empty")
    return keywords


def load_keywords(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[str]:
    """
    Load keywords from a CSV, Excel or text file.

    Automatically detects file type based on extension.

    Args:
        file_path: Path to the keyword file.
        sheet_name: Optional sheet name for Excel files.

    Returns:
        List of keywords in file order.

    Raises:
        KeywordLoadError: If the file cannot be read or is invalid.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        keywords = load_keywords_from_csv(path)
    elif suffix in (".xlsx", ".xls"):
        keywords = load_keywords_from_excel(path, sheet_name)
    elif suffix in (".txt", ""):
        keywords = load_keywords_from_text(path)
    else:
        raise KeywordLoadError(
            f"Unsupported file format: {suffix}. Supported formats: .csv, .xlsx, .xls, .txt"
        )

    logger.info("Loaded %d keywords from %s", len(keywords), path)
    return keywords
