"""
Tests for remediation templates.
"""

from vulnlens.models.issue_models import Issue
from vulnlens.suggestions.templates import (
    DEFAULT,
    HARDCODED_SECRET,
    LOGGING_SENSITIVITY,
    SQL_INJECTION,
    TemplateEngine,
    classify,
)


def make_issue(description, detector=None, fix=""):
    return Issue(
        lineNumber=1,
        description=description,
        severity="high",
        suggestedFix=fix,
        detector=detector,
    )


def test_classify():
    assert classify(make_issue("Possible SQL Injection via concatenation")) == SQL_INJECTION
    assert classify(make_issue("Secrets should not be hardcoded")) == HARDCODED_SECRET
    assert classify(make_issue("Potential sensitive PII detected in logging")) == LOGGING_SENSITIVITY
    assert classify(make_issue("PII field", detector="sensitivity")) == LOGGING_SENSITIVITY
    assert classify(make_issue("Constant naming", detector="pattern")) == DEFAULT


def test_hardcoded_secret_reads_environment():
    code = TemplateEngine().render(
        make_issue("API keys should not be hardcoded"),
        '    private static final String API_KEY = "sk_live_1234567890abcdef";',
    )
    assert code == (
        "    // Use environment variables or configuration files\n"
        '    String API_KEY = System.getenv("API_KEY");'
    )


def test_hardcoded_secret_env_name_from_camel_case():
    code = TemplateEngine().render(
        make_issue("Password is hardcoded"), 'String dbPassword = "hunter2hunter2";'
    )
    assert code.endswith('String dbPassword = System.getenv("DB_PASSWORD");')


def test_logging_call_is_sanitized():
    code = TemplateEngine().render(
        make_issue("Credentials in logging"),
        '        LOGGER.info("User password: " + user.getPassword());',
    )
    assert code == '        LOGGER.info("Sanitized log message without sensitive data");'


def test_print_call_is_sanitized():
    code = TemplateEngine().render(
        make_issue("Card data", detector="sensitivity"),
        '    System.err.print("Card " + account.getCardNumber());',
    )
    assert code == '    System.err.println("Sanitized log message without sensitive data");'


def test_mixed_case_logger_is_sanitized():
    code = TemplateEngine().render(
        make_issue("Credentials in logging"),
        '    Logger.info("p " + u.getPassword());',
    )
    assert code == '    Logger.info("Sanitized log message without sensitive data");'


def test_trailing_comment_survives_sanitizing():
    code = TemplateEngine().render(
        make_issue("Credentials in logging"),
        '    log.debug("token=" + token); // see (JIRA-1)',
    )
    assert code == '    log.debug("Sanitized log message without sensitive data"); // see (JIRA-1)'


def test_semicolon_inside_string_argument():
    code = TemplateEngine().render(
        make_issue("PII field", detector="sensitivity"),
        '    System.out.println("a;b) " + user.getEmail()); // done',
    )
    assert code == '    System.out.println("Sanitized log message without sensitive data"); // done'


def test_sql_injection_uses_prepared_statement():
    code = TemplateEngine().render(
        make_issue("SQL injection risk"),
        '    rs = db.run("SELECT * FROM users WHERE id = " + id);',
    )
    assert "PreparedStatement pstmt = connection.prepareStatement(sql);" in code
    assert "WHERE column = ?" in code


def test_default_template_echoes_fix():
    original = "    static final int maxRetries = 3;"
    code = TemplateEngine().render(
        make_issue("Constant naming", detector="pattern", fix="Rename to MAX_RETRIES"), original
    )
    assert code == (
        "    // Please review and fix the security issue:\n"
        "    // Rename to MAX_RETRIES\n"
        f"{original}"
    )


def test_custom_generator_registry():
    engine = TemplateEngine({DEFAULT: lambda issue, original: "// custom"})
    assert engine.render(make_issue("Anything", detector="pattern"), "x") == "// custom"
    # Families missing from the registry use the default generator
    assert engine.render(make_issue("hardcoded key"), "x") == "// custom"
