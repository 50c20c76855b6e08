"""
Plain-text analysis reports.
"""

from __future__ import annotations

from vulnlens.core.logging_sensitivity import summarize_issues
from vulnlens.models.issue_models import AnalysisResult

SEVERITY_ORDER = ("high", "medium", "low")


def render_report(results: list[AnalysisResult]) -> str:
    """Render counts by severity and category, then every issue with its fix."""
    all_issues = [issue for result in results for issue in result.issues]
    summary = summarize_issues(all_issues)

    lines = ["VULNERABILITY ANALYSIS REPORT", "=" * 50, ""]
    lines.append(f"Total Issues: {summary['total_issues']}")
    for severity in SEVERITY_ORDER:
        lines.append(f"  {severity.upper()}: {summary['by_severity'].get(severity, 0)}")

    if summary["by_category"]:
        lines.append("By Category:")
        for category, count in sorted(summary["by_category"].items()):
            lines.append(f"  {category}: {count}")

    for result in results:
        lines.append("")
        lines.append(f"File: {result.fileName or '<buffer>'} ({len(result.issues)} issues)")
        lines.append("-" * 50)
        if not result.issues:
            lines.append("  No issues found")
            continue
        for index, issue in enumerate(result.issues, start=1):
            lines.append(f"{index}. [{issue.severity.upper()}] Line {issue.lineNumber}")
            lines.append(f"   Description: {issue.description}")
            if issue.suggestedFix:
                lines.append(f"   Fix: {issue.suggestedFix}")

    return "\n".join(lines) + "\n"
