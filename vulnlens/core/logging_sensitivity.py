"""
Sensitive-Logging Detector — Flags sensitive fields passed to log/print calls.

Two phases per line: the line must contain a logging call, then it is tested
against a fixed, ordered catalog of sensitive-field patterns. Every match is a
separate Issue whose fix names the matched text and the remediation for its
category.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from vulnlens.core.log_statements import is_logging_line, split_lines
from vulnlens.models.issue_models import Issue, IssueSeverity

LOG_EXPOSURE_MESSAGE = "Sensitive data is being exposed in log"

PII = "PII"
CREDENTIALS = "Credentials"
API_CREDENTIALS = "API_Credentials"
FINANCIAL = "Financial"
SESSION = "Session"
GENERIC = "Generic"

CATEGORIES = (PII, CREDENTIALS, API_CREDENTIALS, FINANCIAL, SESSION, GENERIC)


@dataclass(frozen=True)
class SensitivePattern:
    pattern: re.Pattern[str]
    description: str
    severity: IssueSeverity
    category: str


def _p(regex: str) -> re.Pattern[str]:
    return re.compile(regex, re.IGNORECASE)


SENSITIVE_PATTERNS: tuple[SensitivePattern, ...] = (
    # Customer / user data accessors
    SensitivePattern(
        _p(r"\.get(?:Customer|User|Personal|Profile|Account)Data\(\)"),
        "Customer/user data is being logged - potential PII exposure",
        "high",
        PII,
    ),
    SensitivePattern(
        _p(r"\.get(?:Customer|User|Client)(?:Info|Information|Details)\(\)"),
        "Customer information is being logged - potential PII exposure",
        "high",
        PII,
    ),
    # Passwords and secrets
    SensitivePattern(
        _p(r"\.get(?:Password|Pass|Pwd|Secret|Token|Key)\(\)"),
        "Password/secret data is being logged - security risk",
        "high",
        CREDENTIALS,
    ),
    SensitivePattern(
        _p(r"\.(?:password|pass|pwd|secret|token|key)\b"),
        "Sensitive credential field is being logged",
        "high",
        CREDENTIALS,
    ),
    # API keys and tokens
    SensitivePattern(
        _p(r"\.getApi(?:Key|Token|Secret)\(\)"),
        "API key/token is being logged - security risk",
        "high",
        API_CREDENTIALS,
    ),
    SensitivePattern(
        _p(r"\.(?:apiKey|apiToken|accessToken|authToken|bearerToken)\b"),
        "API credentials are being logged",
        "high",
        API_CREDENTIALS,
    ),
    # Personal information
    SensitivePattern(
        _p(r"\.get(?:SSN|SocialSecurity|CreditCard|Email|Phone|Address)\(\)"),
        "Personal identifiable information (PII) is being logged",
        "high",
        PII,
    ),
    SensitivePattern(
        _p(r"\.(?:ssn|socialSecurity|creditCard|email|phone|address|firstName|lastName)\b"),
        "PII field is being logged",
        "medium",
        PII,
    ),
    # Financial data
    SensitivePattern(
        _p(r"\.get(?:Account|Bank|Card|Payment)(?:Number|Info|Data|Details)\(\)"),
        "Financial information is being logged - compliance risk",
        "high",
        FINANCIAL,
    ),
    # Session data
    SensitivePattern(
        _p(r"\.get(?:Session|Cookie|Auth)(?:Id|Data|Info)\(\)"),
        "Session/authentication data is being logged",
        "medium",
        SESSION,
    ),
    # Catch-all review flag
    SensitivePattern(
        _p(r"\.getData\(\)"),
        "Generic data method is being logged - review for sensitive content",
        "low",
        GENERIC,
    ),
)

CATEGORY_SEVERITY: dict[str, IssueSeverity] = {
    PII: "high",
    CREDENTIALS: "high",
    API_CREDENTIALS: "high",
    FINANCIAL: "high",
    SESSION: "medium",
    GENERIC: "low",
}

FIX_TEMPLATES: dict[str, str] = {
    PII: (
        "Remove PII logging. Consider logging only non-sensitive identifiers like "
        'user ID or hashed values. Replace "{match}" with sanitized data.'
    ),
    CREDENTIALS: (
        'Never log passwords or secrets. Remove "{match}" from log statement. '
        'Use masked values like "***" for debugging if necessary.'
    ),
    API_CREDENTIALS: (
        'API keys should never be logged. Remove "{match}" and consider logging '
        "only the first/last few characters for debugging."
    ),
    FINANCIAL: (
        'Financial data logging violates compliance standards. Remove "{match}" '
        "and log only transaction IDs or sanitized references."
    ),
    SESSION: (
        'Session data can be used for session hijacking. Remove "{match}" and log '
        "only session status or sanitized session info."
    ),
    GENERIC: (
        'Review the content of "{match}" to ensure no sensitive data is logged. '
        "Consider creating specific non-sensitive logging methods."
    ),
}

DEFAULT_FIX = 'Review and remove sensitive data from logging statement containing "{match}".'


def suggested_fix(category: str, matched_text: str) -> str:
    """Category-specific remediation naming the exact matched substring."""
    return FIX_TEMPLATES.get(category, DEFAULT_FIX).format(match=matched_text)


def check_line(line: str, line_number: int) -> list[Issue]:
    """Test one logging line against the whole catalog."""
    issues: list[Issue] = []
    for entry in SENSITIVE_PATTERNS:
        for match in entry.pattern.finditer(line):
            text = match.group(0)
            issues.append(
                Issue(
                    lineNumber=line_number,
                    description=f'{entry.description}: "{text}"',
                    severity=entry.severity,
                    message=LOG_EXPOSURE_MESSAGE,
                    suggestedFix=suggested_fix(entry.category, text),
                    category=entry.category,
                    detector="sensitivity",
                )
            )
    return issues


def check_logging_sensitivity(source: str) -> list[Issue]:
    """Scan every logging/print line of a document for sensitive fields."""
    issues: list[Issue] = []
    for index, line in enumerate(split_lines(source)):
        if is_logging_line(line):
            issues.extend(check_line(line, index + 1))
    return issues


def summarize_issues(issues: list[Issue]) -> dict[str, object]:
    """Totals by category and by severity."""
    by_category = Counter(issue.category or "Unknown" for issue in issues)
    by_severity = Counter(issue.severity for issue in issues)
    return {
        "total_issues": len(issues),
        "by_category": dict(by_category),
        "by_severity": dict(by_severity),
    }
