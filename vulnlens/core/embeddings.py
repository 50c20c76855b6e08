"""
Embedding backends for the semantic logging detector.

The detector only depends on the EmbeddingBackend protocol. HttpEmbeddingBackend
is the bundled implementation: it talks to an embedding server exposing
GET /health and POST /embedding (llama-server compatible).
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence, runtime_checkable

import httpx
import numpy as np

from vulnlens.config import settings

logger = logging.getLogger("vulnlens.embeddings")


@runtime_checkable
class EmbeddingBackend(Protocol):
    """Capability interface: prepare once, then embed text into fixed-length vectors."""

    def load(self) -> None:
        """Prepare the backend. Raises if it cannot become ready."""
        ...

    def embed(self, text: str) -> Sequence[float]:
        """Return the embedding vector for text."""
        ...


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 for empty, mismatched, or zero vectors."""
    a = np.asarray(vec_a, dtype=np.float32)
    b = np.asarray(vec_b, dtype=np.float32)
    if a.size == 0 or b.size == 0 or a.shape != b.shape:
        return 0.0

    mag_a = np.linalg.norm(a)
    mag_b = np.linalg.norm(b)
    if mag_a == 0 or mag_b == 0:
        return 0.0

    return float(np.dot(a, b) / (mag_a * mag_b))


class HttpEmbeddingBackend:
    """Embedding backend backed by an HTTP embedding server."""

    def __init__(
        self,
        endpoint: str,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout if timeout is not None else settings.embedding_timeout
        self.client = client or httpx.Client(timeout=self._timeout)

    def load(self) -> None:
        """Probe the server's health endpoint."""
        resp = self.client.get(f"{self._endpoint}/health", timeout=5.0)
        resp.raise_for_status()
        logger.info(f"Embedding server ready at {self._endpoint}")

    def embed(self, text: str) -> list[float]:
        resp = self.client.post(f"{self._endpoint}/embedding", json={"content": text})
        resp.raise_for_status()

        data = resp.json()
        if isinstance(data, list) and data:
            emb = data[0].get("embedding", [[]])
            # llama-server nests per-token vectors; pooled output is the first row
            if emb and isinstance(emb[0], list):
                emb = emb[0]
        else:
            emb = data.get("embedding", [])

        vector = np.asarray(emb, dtype=np.float32)
        if vector.size == 0:
            raise ValueError("Embedding server returned an empty vector")

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()


def build_embedding_backend() -> EmbeddingBackend | None:
    """Backend from settings, or None when no embedding endpoint is configured."""
    if not settings.embedding_endpoint:
        return None
    return HttpEmbeddingBackend(settings.embedding_endpoint)
