from __future__ import annotations

import re

_ALLOWED_PREFIX = re.compile(r"^[\s(]*(SELECT|WITH)\b", re.IGNORECASE)
_BLOCK_PATTERNS = [
    re.compile(
        r"\b(INSERT|UPDATE|DELETE|DROP|TRUNCATE|ALTER|CREATE|GRANT|REVOKE|COPY|VACUUM|CALL)\b",
        re.IGNORECASE,
    ),
    re.compile(r";\s*\S"),
]
# literals first so "--" or "/*" inside a string is not read as a comment
_LITERALS_AND_COMMENTS = re.compile(
    r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|--[^\n]*|/\*.*?\*/",
    re.DOTALL,
)


def _strip_literals_and_comments(sql: str) -> str:
    def _replace(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith(("--", "/*")):
            return " "
        return "''"

    return _LITERALS_AND_COMMENTS.sub(_replace, sql)


def validate_sql(sql: str) -> tuple[bool, str | None]:
    """Accept a single read-only SELECT / WITH statement.

    Only the check sees the cleaned text; the caller still runs ``sql`` as given.
    """
    if not sql or not sql.strip():
        return False, "SQL is empty"
    # keywords inside literals, quoted identifiers ("created_at") or comments are not statements
    cleaned = _strip_literals_and_comments(sql)
    if not _ALLOWED_PREFIX.search(cleaned):
        return False, "Only SELECT / WITH queries are allowed"
    for pattern in _BLOCK_PATTERNS:
        if pattern.search(cleaned):
            return False, f"Blocked by SQL firewall pattern: {pattern.pattern}"
    return True, None
