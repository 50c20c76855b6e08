"""
Tests for the HTTP embedding backend, against an httpx mock transport.
"""

import httpx
import pytest

from vulnlens.config import settings
from vulnlens.core.embeddings import HttpEmbeddingBackend, build_embedding_backend
from vulnlens.core.semantic_detector import BackendState, SemanticLoggingDetector


def make_backend(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpEmbeddingBackend("http://embed.local/", client=client)


def test_embed_normalizes_vector():
    def handler(request):
        assert request.url.path == "/embedding"
        return httpx.Response(200, json={"embedding": [3.0, 4.0]})

    vector = make_backend(handler).embed("password")
    assert vector == pytest.approx([0.6, 0.8])


def test_embed_accepts_nested_server_response():
    def handler(request):
        return httpx.Response(200, json=[{"index": 0, "embedding": [[0.0, 2.0]]}])

    assert make_backend(handler).embed("token") == pytest.approx([0.0, 1.0])


def test_empty_vector_is_an_error():
    backend = make_backend(lambda request: httpx.Response(200, json={"embedding": []}))
    with pytest.raises(ValueError):
        backend.embed("x")


def test_load_probes_health():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json={"status": "ok"})

    make_backend(handler).load()
    assert seen == ["/health"]


def test_unhealthy_server_leaves_detector_failed():
    backend = make_backend(lambda request: httpx.Response(503))
    detector = SemanticLoggingDetector(backend, auto_initialize=False)

    assert detector.initialize() is BackendState.FAILED


def test_no_endpoint_means_no_backend(monkeypatch):
    monkeypatch.setattr(settings, "embedding_endpoint", None)
    assert build_embedding_backend() is None
