"""
Remediation Templates — Category-keyed code generators for suggestions.

The template engine is the authoritative source of generated code whenever no
generative capability is configured (or it declines). Every generator takes
the issue and the original line and returns replacement text for that line.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from vulnlens.core.log_statements import LOG_LEVEL, LOGGER_NAME
from vulnlens.models.issue_models import Issue

logger = logging.getLogger("vulnlens.suggestions.templates")

SQL_INJECTION = "sql_injection"
HARDCODED_SECRET = "hardcoded_secret"
LOGGING_SENSITIVITY = "logging_sensitivity"
DEFAULT = "default"

TemplateFn = Callable[[Issue, str], str]

_EXECUTE_QUERY = re.compile(r"Statement.*executeQuery\([^)]+\)")
# Argument list up to the statement's ';'; string literals may contain ';' or ')'
_CALL_ARGS = r"""\((?:"(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*'|[^;"'])*\)\s*;?"""
_LOG_CALL = re.compile(
    rf"\b({LOGGER_NAME})\s*\.\s*({LOG_LEVEL})\s*{_CALL_ARGS}", re.IGNORECASE
)
_PRINT_CALL = re.compile(
    rf"\bSystem\s*\.\s*(out|err)\s*\.\s*(print(?:ln|f)?)\s*{_CALL_ARGS}", re.IGNORECASE
)
_ASSIGNED_NAME = re.compile(r"(\w+)\s*=\s*[\"']")


def classify(issue: Issue) -> str:
    """Pick the template family for an issue from its description and detector."""
    text = issue.description.lower()
    if "sql injection" in text:
        return SQL_INJECTION
    if "hardcoded" in text:
        return HARDCODED_SECRET
    if "logging" in text or issue.detector in ("sensitivity", "semantic", "keyword"):
        return LOGGING_SENSITIVITY
    return DEFAULT


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def _env_var_name(identifier: str) -> str:
    """camelCase / snake_case identifier -> UPPER_SNAKE_CASE."""
    snake = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", identifier)
    return re.sub(r"\W+", "_", snake).upper().strip("_") or "SECURE_VALUE"


def _sql_injection(issue: Issue, original: str) -> str:
    """Rewrite string-built queries as a prepared statement skeleton."""
    indent = _indent_of(original)
    prepared = (
        "PreparedStatement pstmt = connection.prepareStatement(sql);\n"
        f"{indent}// Set parameters using pstmt.setString(), pstmt.setInt(), etc.\n"
        f"{indent}ResultSet rs = pstmt.executeQuery();"
    )
    if _EXECUTE_QUERY.search(original):
        return _EXECUTE_QUERY.sub(lambda _: prepared, original, count=1)
    return (
        f"{indent}// Use a parameterized query instead of string concatenation\n"
        f"{indent}String sql = \"SELECT ... WHERE column = ?\";\n"
        f"{indent}{prepared}"
    )


def _hardcoded_secret(issue: Issue, original: str) -> str:
    """Read the secret from the environment instead of the source."""
    indent = _indent_of(original)
    match = _ASSIGNED_NAME.search(original)
    name = match.group(1) if match else "value"
    return (
        f"{indent}// Use environment variables or configuration files\n"
        f"{indent}String {name} = System.getenv(\"{_env_var_name(name)}\");"
    )


def _logging_sensitivity(issue: Issue, original: str) -> str:
    """Keep the log call, drop its sensitive arguments."""
    indent = _indent_of(original)
    message = '"Sanitized log message without sensitive data"'

    if _LOG_CALL.search(original):
        return _LOG_CALL.sub(lambda m: f"{m.group(1)}.{m.group(2)}({message});", original, count=1)
    if _PRINT_CALL.search(original):
        return _PRINT_CALL.sub(
            lambda m: f"System.{m.group(1)}.println({message});", original, count=1
        )
    return f"{indent}// Redact sensitive values before logging\n{original}"


def _default(issue: Issue, original: str) -> str:
    """Echo the suggested fix as a comment above the original line."""
    indent = _indent_of(original)
    return (
        f"{indent}// Please review and fix the security issue:\n"
        f"{indent}// {issue.suggestedFix or issue.description}\n"
        f"{original}"
    )


# Registry of template generators by family
TEMPLATE_GENERATORS: dict[str, TemplateFn] = {
    SQL_INJECTION: _sql_injection,
    HARDCODED_SECRET: _hardcoded_secret,
    LOGGING_SENSITIVITY: _logging_sensitivity,
    DEFAULT: _default,
}


class TemplateEngine:
    """Dispatches an issue to its template family."""

    def __init__(self, generators: dict[str, TemplateFn] | None = None) -> None:
        self.generators = generators or TEMPLATE_GENERATORS

    def render(self, issue: Issue, original_code: str) -> str:
        """
        Generate replacement code for the issue's line.

        Raises:
            KeyError: If no generator exists for the issue's family.
        """
        family = classify(issue)
        generator = self.generators.get(family) or self.generators[DEFAULT]
        code = generator(issue, original_code)
        logger.debug(f"Rendered '{family}' template for line {issue.lineNumber}")
        return code
