"""
Pytest Configuration and Fixtures
Shared fakes for the Gemini and Chroma clients.
"""
import math
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

VOCABULARY = ["python", "cloud", "product", "design", "sales", "data"]


def keyword_vector(text: str):
    """Deterministic bag-of-keywords embedding"""
    lowered = text.lower()
    vector = [float(lowered.count(word)) for word in VOCABULARY]
    if not any(vector):
        vector[-1] = 0.01
    return vector


class FakeCollection:
    """In-memory stand-in for a Chroma collection"""

    def __init__(self, name, metadata=None):
        self.name = name
        self.metadata = metadata
        self.records = {}
        self.upsert_calls = []

    def upsert(self, ids, embeddings, metadatas):
        # Chroma rejects repeated ids within one call
        if len(set(ids)) != len(ids):
            raise ValueError(f"Expected IDs to be unique, found duplicates in upsert: {ids}")
        self.upsert_calls.append(list(ids))
        for record_id, embedding, metadata in zip(ids, embeddings, metadatas):
            self.records[record_id] = (embedding, metadata)

    def count(self):
        return len(self.records)

    def query(self, query_embeddings, n_results, include):
        query = query_embeddings[0]
        scored = []
        for record_id, (embedding, metadata) in self.records.items():
            dot = sum(a * b for a, b in zip(query, embedding))
            norm = math.sqrt(sum(a * a for a in query)) * math.sqrt(sum(b * b for b in embedding))
            distance = 1 - (dot / norm if norm else 0.0)
            scored.append((distance, record_id, metadata))
        scored.sort(key=lambda item: item[0])
        scored = scored[:n_results]
        return {
            'ids': [[record_id for _, record_id, _ in scored]],
            'distances': [[distance for distance, _, _ in scored]],
            'metadatas': [[metadata for _, _, metadata in scored]],
        }


class FakeChromaClient:
    """In-memory stand-in for a Chroma client"""

    def __init__(self):
        self.collections = {}

    def get_or_create_collection(self, name, metadata=None):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, metadata)
        return self.collections[name]

    def list_collections(self):
        return list(self.collections)


class FakeEmbedder:
    """Keyword embedder that can be told to fail on certain texts"""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.documents = []
        self.queries = []

    def _check(self, text):
        for marker in self.fail_on:
            if marker in text:
                raise RuntimeError(f"embedding failed for {marker}")

    def embed_document(self, text):
        self._check(text)
        self.documents.append(text)
        return keyword_vector(text)

    def embed_query(self, text):
        self._check(text)
        self.queries.append(text)
        return keyword_vector(text)


class FakeGenerativeModel:
    """Returns canned replies and records prompts"""

    def __init__(self, reply=""):
        self.reply = reply
        self.prompts = []

    def generate_content(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        return SimpleNamespace(text=self.reply)


def make_candidate(name, email, skills, roles=(), location="Remote"):
    return {
        "name": name,
        "email": email,
        "location": location,
        "work_availability": ["full-time"],
        "annual_salary_expectation": {"full-time": "$100000"},
        "skills": list(skills),
        "work_experiences": [{"roleName": role, "company": company} for role, company in roles],
        "education": {
            "highest_level": "Bachelor's Degree",
            "degrees": [
                {"degree": "Bachelor's Degree", "subject": "Computer Science", "school": "State University"}
            ]
        }
    }


@pytest.fixture
def candidates():
    """A small candidate pool with distinct skill profiles"""
    return [
        make_candidate("Ada Python", "ada@example.com", ["Python", "Data"], [("Data Engineer", "Acme")]),
        make_candidate("Bo Cloud", "bo@example.com", ["Cloud", "Python"], [("SRE", "Nimbus")]),
        make_candidate("Cy Product", "cy@example.com", ["Product", "Design"], [("Product Manager", "Shop")]),
        make_candidate("Di Sales", "di@example.com", ["Sales"], [("Account Executive", "Deals")]),
        make_candidate("Ed Design", "ed@example.com", ["Design"], [("Designer", "Studio")]),
        make_candidate("Fay Data", "fay@example.com", ["Data", "Python", "Cloud"], [("Analyst", "Metrics")]),
    ]


@pytest.fixture
def chroma_client():
    return FakeChromaClient()


@pytest.fixture
def vector_store(chroma_client):
    from embedding.vectorstore import CandidateVectorStore
    return CandidateVectorStore(index_name="test-candidates", client=chroma_client)


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def populated_store(vector_store, embedder, candidates):
    """Vector store holding every candidate from the pool"""
    from embedding.vectorstore import build_candidate_metadata, create_candidate_description

    vector_store.upsert([
        {
            'id': candidate['email'],
            'values': embedder.embed_document(create_candidate_description(candidate)),
            'metadata': build_candidate_metadata(candidate)
        }
        for candidate in candidates
    ])
    return vector_store


@pytest.fixture
def fake_model():
    return FakeGenerativeModel()


@pytest.fixture
def engine(populated_store, embedder, candidates, fake_model):
    """Team selection engine wired to in-memory fakes"""
    from recommender.engine import CandidateCatalog, TeamSelectionEngine

    team_engine = TeamSelectionEngine(
        populated_store,
        embedder,
        CandidateCatalog(candidates),
        gemini_api_key="test-key",
        team_size=3,
        top_k=5
    )
    team_engine.model = fake_model
    return team_engine
