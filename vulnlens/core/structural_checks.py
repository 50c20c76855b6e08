"""
Structural Checks — Rules that have no pattern and need more than one line.

Each check takes the rule it serves plus the source text and returns
RawFindings, so the scanner can treat them like pattern findings. Checks are
registered by rule id; a pattern-less rule without a registered check is
skipped.
"""

from __future__ import annotations

import re
from typing import Callable

from vulnlens.config import settings
from vulnlens.core.rule_store import EXCESSIVE_NESTING
from vulnlens.models.rule_models import RawFinding, Rule

StructuralCheckFn = Callable[[Rule, str], list[RawFinding]]

CONTROL_KEYWORDS = re.compile(
    r"\b(if|else|for|while|do|switch|try|catch|finally)\b"
)
_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')


def _strip_code(line: str, in_block_comment: bool) -> tuple[str, bool]:
    """Remove literals and comments from one line. Returns (code, still_in_comment)."""
    out: list[str] = []
    i = 0
    line = _STRING_LITERAL.sub('""', line)
    while i < len(line):
        if in_block_comment:
            end = line.find("*/", i)
            if end == -1:
                return "".join(out), True
            i = end + 2
            in_block_comment = False
            continue
        if line.startswith("//", i):
            break
        if line.startswith("/*", i):
            in_block_comment = True
            i += 2
            continue
        out.append(line[i])
        i += 1
    return "".join(out), in_block_comment


def check_excessive_nesting(
    rule: Rule, source: str, max_depth: int | None = None
) -> list[RawFinding]:
    """
    Flag control-structure blocks opened deeper than max_depth.

    Brace-depth scan: every '{' whose header (code since the last ';', '{' or
    '}' outside parentheses) contains a control keyword counts as one level.
    One finding per offending line.
    """
    limit = max_depth if max_depth is not None else settings.max_nesting_depth
    findings: list[RawFinding] = []
    stack: list[bool] = []
    header: list[str] = []
    paren_depth = 0
    in_comment = False

    for index, raw_line in enumerate(source.split("\n")):
        code, in_comment = _strip_code(raw_line.rstrip("\r"), in_comment)
        flagged = False

        for ch in code:
            if ch == "(":
                paren_depth += 1
            elif ch == ")":
                paren_depth = max(0, paren_depth - 1)

            if ch == "{":
                is_control = bool(CONTROL_KEYWORDS.search("".join(header)))
                stack.append(is_control)
                header = []
                paren_depth = 0
                depth = sum(stack)
                if is_control and depth > limit and not flagged:
                    flagged = True
                    findings.append(
                        RawFinding(
                            rule_id=rule.id,
                            line=index + 1,
                            description=f"{rule.description} (depth {depth})",
                            severity=rule.severity,
                            matched_text=raw_line.strip(),
                        )
                    )
            elif ch == "}":
                if stack:
                    stack.pop()
                header = []
                paren_depth = 0
            elif ch == ";" and paren_depth == 0:
                header = []
            else:
                header.append(ch)
        header.append(" ")

    return findings


# Registry of structural checks by rule id
STRUCTURAL_CHECKS: dict[str, StructuralCheckFn] = {
    EXCESSIVE_NESTING: check_excessive_nesting,
}
