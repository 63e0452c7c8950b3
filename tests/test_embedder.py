"""
Test Suite for the Gemini Embedder
Tests key handling, task types and error propagation.
"""
import google.generativeai as genai
import pytest

from embedding.embedder import CandidateEmbedder


@pytest.fixture
def embed_calls(monkeypatch):
    calls = []

    def fake_embed_content(model, content, task_type):
        calls.append({'model': model, 'content': content, 'task_type': task_type})
        return {'embedding': [0.1, 0.2, 0.3]}

    monkeypatch.setattr(genai, "embed_content", fake_embed_content)
    return calls


class TestCandidateEmbedder:
    """Tests for CandidateEmbedder."""

    def test_missing_key(self, monkeypatch):
        """Construction should fail without an API key."""
        monkeypatch.setattr("config.settings.GEMINI_API_KEY", None)
        with pytest.raises(ValueError):
            CandidateEmbedder()

    def test_document_task_type(self, embed_calls):
        embedder = CandidateEmbedder(api_key="test-key", model="models/test-embedding")
        vector = embedder.embed_document("Candidate name: Ada")

        assert vector == [0.1, 0.2, 0.3]
        assert embed_calls == [{
            'model': "models/test-embedding",
            'content': "Candidate name: Ada",
            'task_type': "retrieval_document"
        }]

    def test_query_task_type(self, embed_calls):
        embedder = CandidateEmbedder(api_key="test-key")
        embedder.embed_query("Python engineers")

        assert embed_calls[0]['task_type'] == "retrieval_query"

    def test_errors_propagate(self, monkeypatch):
        """API failures should be re-raised, not retried."""
        attempts = []

        def failing_embed_content(**kwargs):
            attempts.append(kwargs)
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(genai, "embed_content", failing_embed_content)
        embedder = CandidateEmbedder(api_key="test-key")

        with pytest.raises(RuntimeError, match="quota exceeded"):
            embedder.embed_query("anything")
        assert len(attempts) == 1
