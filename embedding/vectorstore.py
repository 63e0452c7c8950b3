"""
Candidate Vector Store

Manages candidate vectors and similarity search in a hosted Chroma index.
"""

import json
import logging
from typing import Any, List, Dict, Optional
import chromadb
from chromadb.config import Settings

from config import settings

logger = logging.getLogger(__name__)

# Metadata fields stored as JSON strings (Chroma metadata must be scalar)
LIST_METADATA_FIELDS = ("skills", "work_availability")


def describe_candidate_profile(candidate: Dict) -> str:
    """
    Describe a candidate's location, pay, skills, experience and education

    Args:
        candidate: Candidate dictionary as found in candidates.json

    Returns:
        One line per profile section
    """
    skills = ", ".join(candidate.get('skills') or [])

    experience = "; ".join(
        f"{exp.get('roleName', '')} at {exp.get('company', '')}"
        for exp in candidate.get('work_experiences') or []
    )

    degrees = (candidate.get('education') or {}).get('degrees') or []
    education = "; ".join(
        f"{deg.get('degree', '')} in {deg.get('subject', '')} from "
        f"{deg.get('originalSchool') or deg.get('school', '')}"
        for deg in degrees
    )

    salary = ", ".join(
        f"{key}: {value}"
        for key, value in (candidate.get('annual_salary_expectation') or {}).items()
    )

    doc_parts = [
        f"Location: {candidate.get('location', '')}",
        f"Work availability: {', '.join(candidate.get('work_availability') or [])}",
        f"Salary expectation: {salary}",
        f"Skills: {skills}",
        f"Work experience: {experience}",
        f"Education: {education}"
    ]

    return "\n".join(doc_parts)


def create_candidate_description(candidate: Dict) -> str:
    """Rich text representation of a candidate for embedding"""
    return f"Candidate name: {candidate.get('name', '')}\n{describe_candidate_profile(candidate)}"


def build_candidate_metadata(candidate: Dict) -> Dict:
    """Metadata stored next to a candidate vector"""
    experiences = candidate.get('work_experiences') or []
    recent = experiences[0] if experiences else {}

    return {
        "name": candidate.get('name'),
        "email": candidate.get('email'),
        "location": candidate.get('location'),
        "skills": candidate.get('skills') or [],
        "work_availability": candidate.get('work_availability') or [],
        "highest_education": (candidate.get('education') or {}).get('highest_level'),
        "recent_role": recent.get('roleName'),
        "recent_company": recent.get('company')
    }


def _encode_metadata(metadata: Optional[Dict]) -> Dict[str, Any]:
    encoded = {}
    for key, value in (metadata or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, dict)):
            value = json.dumps(value)
        encoded[key] = value
    return encoded


def _decode_metadata(metadata: Optional[Dict]) -> Dict[str, Any]:
    decoded = dict(metadata or {})
    for key in LIST_METADATA_FIELDS:
        if isinstance(decoded.get(key), str):
            try:
                decoded[key] = json.loads(decoded[key])
            except json.JSONDecodeError:
                decoded[key] = [decoded[key]]
    return decoded


def _connect(db_path: str):
    if settings.CHROMA_HOST:
        headers = {}
        if settings.CHROMA_TOKEN:
            headers["Authorization"] = f"Bearer {settings.CHROMA_TOKEN}"
        logger.info(f"Connecting to Chroma server at {settings.CHROMA_HOST}:{settings.CHROMA_PORT}")
        return chromadb.HttpClient(
            host=settings.CHROMA_HOST,
            port=settings.CHROMA_PORT,
            ssl=settings.CHROMA_SSL,
            headers=headers,
            settings=Settings(anonymized_telemetry=False)
        )

    logger.info(f"Using local Chroma store at {db_path}")
    return chromadb.PersistentClient(
        path=db_path,
        settings=Settings(anonymized_telemetry=False)
    )


class CandidateVectorStore:
    """
    Vector index of candidate profiles keyed by email
    """

    def __init__(
        self,
        index_name: str = settings.CANDIDATE_INDEX,
        client=None,
        db_path: str = settings.CHROMA_PATH
    ):
        """
        Initialize vector store

        Args:
            index_name: Name of the Chroma collection holding candidates
            client: Pre-built Chroma client (a hosted or local one is created when omitted)
            db_path: Local storage path used when no Chroma host is configured
        """
        self.index_name = index_name
        self.client = client if client is not None else _connect(db_path)
        self._collection = None

    @property
    def collection(self):
        if self._collection is None:
            self._collection = self.client.get_or_create_collection(
                name=self.index_name,
                metadata={"hnsw:space": "cosine"}
            )
        return self._collection

    def index_exists(self) -> bool:
        """Check whether the candidate index has been created"""
        # list_collections yields names or Collection objects depending on the chromadb release
        names = [getattr(c, 'name', c) for c in self.client.list_collections()]
        return self.index_name in names

    def create_index(self) -> None:
        """Create the cosine-metric candidate index if it does not exist yet"""
        if self.index_exists():
            logger.info(f"Index {self.index_name} already exists")
        else:
            logger.info(f"Creating vector index: {self.index_name}")

        _ = self.collection

    def upsert(self, vectors: List[Dict], batch_size: int = settings.UPSERT_BATCH_SIZE) -> int:
        """
        Insert or replace vectors in batches

        Args:
            vectors: Dictionaries with 'id', 'values' and optional 'metadata'
            batch_size: Maximum vectors per write

        Returns:
            Number of vectors written
        """
        if not vectors:
            return 0

        batches = [vectors[i:i + batch_size] for i in range(0, len(vectors), batch_size)]
        logger.info(f"Upserting {len(vectors)} vectors in {len(batches)} batches")

        for i, batch in enumerate(batches):
            self.collection.upsert(
                ids=[vector['id'] for vector in batch],
                embeddings=[vector['values'] for vector in batch],
                metadatas=[_encode_metadata(vector.get('metadata')) for vector in batch]
            )
            logger.info(f"Upserted batch {i + 1}/{len(batches)}")

        return len(vectors)

    def query(self, vector: List[float], top_k: int = settings.MATCH_TOP_K) -> List[Dict]:
        """
        Similarity search for candidates

        Args:
            vector: Query embedding
            top_k: Number of matches to return

        Returns:
            List of matches with id, score and metadata, best first
        """
        count = self.get_count()
        if count == 0:
            logger.warning(f"Index {self.index_name} is empty")
            return []

        results = self.collection.query(
            query_embeddings=[vector],
            n_results=min(top_k, count),
            include=["metadatas", "distances"]
        )

        matches = []

        if results['ids'] and len(results['ids']) > 0:
            distances = results.get('distances') or [[]]
            metadatas = results.get('metadatas') or [[]]
            for i, candidate_id in enumerate(results['ids'][0]):
                distance = distances[0][i] if i < len(distances[0]) else None
                metadata = metadatas[0][i] if i < len(metadatas[0]) else None

                # Cosine distance to similarity
                score = 1 - distance if distance is not None else 0.0

                matches.append({
                    'id': candidate_id,
                    'score': score,
                    'metadata': _decode_metadata(metadata)
                })

        return matches

    def get_count(self) -> int:
        """Get total number of candidates in the index"""
        return self.collection.count()


def load_candidates_from_file(file_path: str) -> List[Dict]:
    """
    Load candidates from JSON file

    Args:
        file_path: Path to candidates JSON file

    Returns:
        List of candidate dictionaries
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        candidates = json.load(f)

    logger.info(f"Loaded {len(candidates)} candidates from {file_path}")
    return candidates
