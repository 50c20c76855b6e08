"""
Tests for the Semantic Similarity Detector — backend lifecycle, embedding
classification, and keyword fallback.
"""

import pytest

from vulnlens.core.embeddings import EmbeddingBackend, cosine_similarity
from vulnlens.core.semantic_detector import (
    SENSITIVE_KEYWORDS,
    BackendState,
    SemanticLoggingDetector,
    extract_candidates,
    keyword_line_analysis,
)

PASSWORD_LINE = 'LOGGER.info("User password: " + user.getPassword());'
VOCAB_SIZE = sum(len(group.keywords) for group in SENSITIVE_KEYWORDS)


def ready_detector(backend, **kwargs):
    detector = SemanticLoggingDetector(backend, auto_initialize=False, **kwargs)
    assert detector.initialize() is BackendState.READY
    return detector


# ── Lifecycle ──


def test_background_initialization_reaches_ready(fake_backend):
    detector = SemanticLoggingDetector(fake_backend)
    assert detector.wait_until_settled(timeout=5) is BackendState.READY
    assert detector.is_ready


def test_initialization_runs_once(fake_backend):
    detector = SemanticLoggingDetector(fake_backend, auto_initialize=False)
    assert detector.state is BackendState.UNINITIALIZED

    detector.initialize()
    detector.initialize()
    assert fake_backend.load_calls == 1


def test_missing_backend_fails_over_to_keywords():
    detector = SemanticLoggingDetector(None, auto_initialize=False)
    assert detector.initialize() is BackendState.FAILED

    issues = detector.analyze(PASSWORD_LINE)
    assert issues
    assert {i.detector for i in issues} == {"keyword"}


def test_failed_load_is_terminal(backend_factory):
    backend = backend_factory(fail_load=True)
    detector = SemanticLoggingDetector(backend, auto_initialize=False)

    assert detector.initialize() is BackendState.FAILED
    assert detector.initialize() is BackendState.FAILED
    assert backend.load_calls == 1
    assert not detector.is_ready


def test_uninitialized_backend_is_never_called(fake_backend):
    detector = SemanticLoggingDetector(fake_backend, auto_initialize=False)
    issues = detector.analyze(PASSWORD_LINE)

    assert {i.detector for i in issues} == {"keyword"}
    assert fake_backend.embed_calls == 0


def test_fake_backend_satisfies_protocol(fake_backend):
    assert isinstance(fake_backend, EmbeddingBackend)


# ── Keyword matching ──


def test_keyword_line_analysis():
    issues = keyword_line_analysis(PASSWORD_LINE, 8)

    assert [(i.category, i.severity) for i in issues] == [
        ("Credentials", "high"),
        ("PII", "medium"),
        ("PII", "medium"),
    ]
    assert issues[0].description == (
        'Potential sensitive Credentials keyword detected in logging: "password" (keyword matching)'
    )
    assert all(i.lineNumber == 8 for i in issues)


def test_keywords_require_word_boundaries():
    assert keyword_line_analysis('log.info("passwords " + apiVersion);', 1) == []


# ── Embedding classification ──


def test_extract_candidates():
    assert extract_candidates(PASSWORD_LINE) == [
        "User password: ",
        "getPassword()",
        "User",
        "password",
        "user",
        "getPassword",
    ]


def test_candidates_shorter_than_three_are_dropped():
    assert extract_candidates('log.info("ok" + "id");') == []


def test_semantic_issue_reports_similarity(fake_backend):
    detector = ready_detector(fake_backend)
    issues = detector.analyze(PASSWORD_LINE)

    assert issues
    assert {i.detector for i in issues} == {"semantic"}
    descriptions = [i.description for i in issues]
    assert (
        'Potential sensitive Credentials detected in logging: "password" (similarity: 100.0%)'
        in descriptions
    )
    assert (
        'Potential sensitive Credentials detected in logging: "User password: " (similarity: 90.0%)'
        in descriptions
    )


def test_threshold_filters_weaker_matches(fake_backend):
    detector = ready_detector(fake_backend, threshold=0.95)
    matched = [i.description for i in detector.analyze(PASSWORD_LINE)]

    assert any('"password"' in d for d in matched)
    assert not any('"User password: "' in d for d in matched)


def test_semantic_is_superset_of_keyword_matching(fake_backend, sample_java_code):
    detector = ready_detector(fake_backend)
    semantic = {(i.lineNumber, i.category) for i in detector.analyze(sample_java_code)}
    keyword = {(i.lineNumber, i.category) for i in detector.keyword_analysis(sample_java_code)}

    assert keyword
    assert keyword <= semantic


def test_embedding_error_degrades_only_that_line(backend_factory, sample_java_code):
    backend = backend_factory(fail_on="Session")
    detector = ready_detector(backend)
    issues = detector.analyze(sample_java_code)

    by_line = {}
    for issue in issues:
        by_line.setdefault(issue.lineNumber, set()).add(issue.detector)

    assert by_line[9] == {"keyword"}
    assert by_line[8] == {"semantic"}
    assert by_line[10] == {"semantic"}


def test_keyword_vectors_are_not_reused_across_calls(fake_backend):
    detector = ready_detector(fake_backend)
    line = 'log.info("hello world");'

    detector.analyze(line)
    assert fake_backend.embed_calls == VOCAB_SIZE + 1
    detector.analyze(line)
    assert fake_backend.embed_calls == 2 * (VOCAB_SIZE + 1)


def test_no_logging_lines_means_no_embedding(fake_backend, clean_java_code):
    detector = ready_detector(fake_backend)
    assert detector.analyze(clean_java_code) == []
    assert fake_backend.embed_calls == 0


def test_best_match_per_category(fake_backend):
    detector = ready_detector(fake_backend)
    issues = detector.analyze('log.info("password");')

    assert len(issues) == 1
    assert issues[0].category == "Credentials"


# ── Cosine similarity ──


@pytest.mark.parametrize("a, b, expected", [
    ([1.0, 0.0], [1.0, 0.0], 1.0),
    ([1.0, 0.0], [0.0, 1.0], 0.0),
    ([1.0, 0.0], [-1.0, 0.0], -1.0),
    ([], [], 0.0),
    ([1.0, 2.0], [1.0], 0.0),
    ([0.0, 0.0], [1.0, 1.0], 0.0),
])
def test_cosine_similarity(a, b, expected):
    assert cosine_similarity(a, b) == pytest.approx(expected)
