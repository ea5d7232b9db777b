"""
Log sanitization utilities to prevent PII and credential leakage.

File names and search queries can carry personal data and access tokens are
secrets, so they are reduced to a non-identifying summary before logging.
"""

import re


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename for logging.

    Args:
        filename: Filename to sanitize

    Returns:
        Sanitized filename representation

    Example:
        "salary-2025.json" -> "[file.json] (16 chars)"
    """
    if not filename:
        return "[no-filename]"

    # Show only extension and length for privacy
    parts = filename.split('.')
    if len(parts) > 1 and parts[-1]:
        extension = parts[-1].lower()
        return f"[file.{extension}] ({len(filename)} chars)"
    return f"[file] ({len(filename)} chars)"


def sanitize_file_id(file_id: str) -> str:
    """
    Sanitize a Drive file or folder ID for logging.

    Args:
        file_id: ID to sanitize

    Returns:
        The first 6 and last 4 characters of long IDs
    """
    if not file_id:
        return "[no-id]"

    if len(file_id) <= 12:
        return f"[id: {file_id}]"
    return f"[id: {file_id[:6]}...{file_id[-4:]}]"


def sanitize_token(token: str) -> str:
    """
    Sanitize an access token for logging. Never shows token content.

    Args:
        token: Bearer token

    Returns:
        Presence and length only
    """
    if not token:
        return "[no-token]"
    return f"[token] ({len(token)} chars)"


def sanitize_query(query: str, max_length: int = 40) -> str:
    """
    Sanitize Drive search query for logging by masking quoted literals.

    Args:
        query: Search query to sanitize
        max_length: Maximum length to show

    Returns:
        Sanitized query representation
    """
    if not query:
        return "[empty-query]"

    # Quoted literals hold folder ids and file names
    sanitized = re.sub(r"'(?:[^'\\]|\\.)*'", "'***'", query)

    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."

    return f"'{sanitized}' ({len(query)} chars)"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (file_name, file_id, folder_id, query, token, ...)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in ('file_name', 'name', 'filename'):
            sanitized[key] = sanitize_filename(value)
        elif key in ('file_id', 'folder_id', 'from_folder_id', 'to_folder_id'):
            sanitized[key] = sanitize_file_id(value)
        elif key == 'query':
            sanitized[key] = sanitize_query(value) if value else None
        elif key in ('token', 'access_token'):
            sanitized[key] = sanitize_token(value)
        else:
            # Other fields carry no personal data
            sanitized[key] = value

    return sanitized
