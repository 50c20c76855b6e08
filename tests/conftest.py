"""
Test fixtures shared across all VulnLens tests.
"""

import pytest

from vulnlens.core.semantic_detector import SENSITIVE_KEYWORDS


class FakeEmbeddingBackend:
    """
    Deterministic embeddings over the keyword vocabulary.

    An exact keyword (case-insensitive) embeds to its one-hot vector. Text that
    contains a keyword embeds 0.9 toward the longest one it contains. Anything
    else is orthogonal to every keyword.
    """

    def __init__(self, fail_on: str | None = None, fail_load: bool = False):
        self.vocab = [kw for group in SENSITIVE_KEYWORDS for kw in group.keywords]
        self.fail_on = fail_on
        self.fail_load = fail_load
        self.loaded = False
        self.load_calls = 0
        self.embed_calls = 0

    def load(self):
        self.load_calls += 1
        if self.fail_load:
            raise ConnectionError("embedding server unreachable")
        self.loaded = True

    def embed(self, text):
        self.embed_calls += 1
        if self.fail_on and self.fail_on in text:
            raise RuntimeError(f"cannot embed {text!r}")

        vector = [0.0] * (len(self.vocab) + 1)
        lowered = text.lower()
        if lowered in self.vocab:
            vector[self.vocab.index(lowered)] = 1.0
            return vector

        contained = [kw for kw in self.vocab if kw in lowered]
        if contained:
            best = max(contained, key=len)
            vector[self.vocab.index(best)] = 0.9
            vector[-1] = (1 - 0.81) ** 0.5
        else:
            vector[-1] = 1.0
        return vector


@pytest.fixture
def fake_backend():
    return FakeEmbeddingBackend()


@pytest.fixture
def sample_java_code():
    """Java source with known rule, logging, and nesting findings."""
    return """package com.example;

public class AccountService {
    static final int maxRetries = 3;
    private static final String API_KEY = "sk_live_1234567890abcdef";

    public void login(User user) {
        LOGGER.info("User password: " + user.getPassword());
        log.debug("Session " + request.getSessionId());
        System.out.println("Card " + account.getCardNumber());
        LOGGER.info("Payload " + response.getData());
        LOGGER.info("Starting batch job");
    }
}
"""


@pytest.fixture
def deeply_nested_java_code():
    return """public class Nested {
    void run(int[] items) {
        for (int i = 0; i < items.length; i++) {
            if (items[i] > 0) {
                while (items[i] > 10) {
                    if (items[i] % 2 == 0) {
                        try {
                            items[i]--;
                        } catch (Exception e) {
                            break;
                        }
                    }
                }
            }
        }
    }
}
"""


@pytest.fixture
def clean_java_code():
    """Java source with no findings."""
    return """public class Greeter {
    static final int MAX_RETRIES = 3;

    public String greet(String name) {
        return "Hello, " + name;
    }
}
"""


@pytest.fixture
def rules_path(tmp_path):
    return tmp_path / "rules" / "vulnerability-rules.json"


@pytest.fixture
def backend_factory():
    """Build FakeEmbeddingBackends with custom failure modes."""
    return FakeEmbeddingBackend
