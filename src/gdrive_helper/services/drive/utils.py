"""Helpers for building Drive search queries."""

from typing import Optional

from ...exceptions import ValidationError


def escape_query_value(value: str) -> str:
    """
    Escapes a string for use inside a single-quoted Drive query literal.
    Args:
        value: The raw folder id or file name.
    Returns:
        The value with backslashes and single quotes escaped.
    """
    return value.replace("\\", "\\\\").replace("'", "\\'")


def validate_folder_id(folder_id: str) -> None:
    if not folder_id or not isinstance(folder_id, str):
        raise ValidationError("folder_id must be a non-empty string")


def validate_file_name(file_name: str) -> None:
    if not file_name or not isinstance(file_name, str):
        raise ValidationError("file_name must be a non-empty string")


def build_parent_query(folder_id: str, file_name: Optional[str] = None) -> str:
    """
    Builds a search query matching the children of a folder.
    Args:
        folder_id: The folder whose children are searched.
        file_name: Optional exact file name to match.
    Returns:
        A Drive query string, e.g. "name = 'a.json' and 'F' in parents".
    """
    validate_folder_id(folder_id)
    parent_clause = f"'{escape_query_value(folder_id)}' in parents"
    if file_name is None:
        return parent_clause
    validate_file_name(file_name)
    return f"name = '{escape_query_value(file_name)}' and {parent_clause}"
