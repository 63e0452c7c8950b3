"""
LLM-Based Team Selection Engine

Pipeline for assembling a diverse team from the candidate pool:
1. Requirements Embedding (Gemini)
2. Initial Retrieval (Vector Search)
3. Profile Join (local candidates.json)
4. Team Selection (LLM)
5. Profile Mapping
"""

import json
import logging
import re
from typing import List, Dict, Optional
import google.generativeai as genai

from config import settings
from embedding.embedder import CandidateEmbedder
from embedding.vectorstore import (
    CandidateVectorStore,
    describe_candidate_profile,
    load_candidates_from_file
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI expert in talent acquisition and team composition. "
    "Your response must be valid JSON."
)

_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


class NoMatchingCandidatesError(LookupError):
    """Vector search produced no candidate present in the local catalog"""


class TeamSelectionError(ValueError):
    """The language model reply could not be turned into a team"""


def parse_json_array(text: Optional[str]) -> List:
    """
    Parse the first JSON array found in an LLM reply

    Markdown code fences and surrounding prose are ignored.

    Raises:
        TeamSelectionError: If no JSON array can be parsed
    """
    text = (text or "").strip()
    if text.startswith('```'):
        text = re.sub(r"^```[A-Za-z0-9_-]*\s*", "", text)
        text = re.sub(r"\s*```$", "", text)

    match = _JSON_ARRAY.search(text)
    if not match:
        raise TeamSelectionError("No valid JSON found in response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise TeamSelectionError(f"Invalid JSON in response: {e}") from e

    if not isinstance(data, list):
        raise TeamSelectionError("Expected a JSON array")
    return data


def _as_text_list(value) -> List[str]:
    if not value:
        return []
    if not isinstance(value, list):
        return [str(value)]
    return [str(item) for item in value]


def format_candidate(candidate: Dict, position: int) -> str:
    """Describe one candidate for the selection prompt"""
    header = f"Candidate {position}: {candidate.get('name', '')} ({candidate.get('email', '')})"
    return f"{header}\n{describe_candidate_profile(candidate)}"


class CandidateCatalog:
    """
    Full candidate records keyed by email
    """

    def __init__(self, candidates: List[Dict]):
        self._by_email = {}
        for candidate in candidates:
            email = candidate.get('email')
            if email and email not in self._by_email:
                self._by_email[email] = candidate

    @classmethod
    def from_file(cls, file_path: str) -> "CandidateCatalog":
        return cls(load_candidates_from_file(file_path))

    def get(self, email: str) -> Optional[Dict]:
        return self._by_email.get(email)

    def __len__(self) -> int:
        return len(self._by_email)


class TeamSelectionEngine:
    """
    LLM-powered selection of a diverse candidate team
    """

    def __init__(
        self,
        vector_store: CandidateVectorStore,
        embedder: CandidateEmbedder,
        catalog: CandidateCatalog,
        gemini_api_key: Optional[str] = None,
        model: str = settings.CHAT_MODEL,
        team_size: int = settings.TEAM_SIZE,
        top_k: int = settings.MATCH_TOP_K
    ):
        """
        Initialize team selection engine

        Args:
            vector_store: Initialized candidate vector store
            embedder: Embedder for job requirements
            catalog: Full candidate records for joining search results
            gemini_api_key: Gemini API key
            model: Gemini chat model name
            team_size: Number of team members to select
            top_k: Number of similar candidates offered to the LLM
        """
        self.vector_store = vector_store
        self.embedder = embedder
        self.catalog = catalog
        self.team_size = team_size
        self.top_k = top_k

        api_key = gemini_api_key or settings.GEMINI_API_KEY
        if not api_key:
            raise ValueError("GEMINI_API_KEY not found in environment")

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model, system_instruction=SYSTEM_PROMPT)

        logger.info("Initialized team selection engine")

    def create_embedding(self, text: str) -> List[float]:
        """Embed arbitrary text with the query embedding model"""
        return self.embedder.embed_query(text)

    def query_candidates(self, requirements: str, limit: Optional[int] = None) -> List[Dict]:
        """
        Retrieve candidates similar to the job requirements

        Args:
            requirements: Job requirements text
            limit: Number of matches (defaults to the engine's top_k)

        Returns:
            List of matches with id, score and metadata
        """
        query_vector = self.embedder.embed_query(requirements)
        return self.vector_store.query(query_vector, top_k=limit or self.top_k)

    def match_candidates(self, requirements: str) -> List[Dict]:
        """
        Retrieve similar candidates joined with their full profiles

        Matches missing from the catalog are dropped; rank order is kept.
        """
        matched = []
        for match in self.query_candidates(requirements, limit=self.top_k):
            candidate = self.catalog.get(match['id'])
            if candidate is None:
                logger.debug(f"Match {match['id']} not found in candidate catalog")
                continue
            matched.append({'candidate': candidate, 'score': match['score']})

        logger.debug(f"Joined {len(matched)} of the top {self.top_k} matches")
        return matched

    def build_team_prompt(self, requirements: str, matched: List[Dict]) -> str:
        """Build the selection prompt for the matched candidates"""
        candidate_descriptions = "\n\n".join(
            format_candidate(item['candidate'], i + 1) for i, item in enumerate(matched)
        )

        return f"""Job Requirements:
{requirements}

Below are the top {len(matched)} candidates based on initial similarity matching:

{candidate_descriptions}

Select the {self.team_size} best candidates that form a diverse team to address all aspects of the job requirements.
Each selected candidate should bring unique strengths and complement the others.

For each selected candidate, explain:
1. Why they were chosen
2. What unique strengths they bring to the team
3. How they complement the other team members

Respond ONLY with a JSON array in this format (no markdown, no code blocks):
[
    {{
        "candidate_email": "email of the candidate",
        "reasons": ["reason 1", "reason 2"],
        "unique_strengths": ["strength 1", "strength 2"],
        "complements_team": "explanation of how they complement others"
    }}
]"""

    def _generate(self, prompt: str) -> str:
        response = self.model.generate_content(
            prompt,
            generation_config=genai.GenerationConfig(
                temperature=0.5,
                max_output_tokens=2000
            )
        )
        return response.text

    def _to_team(self, selections: List, matched: List[Dict]) -> List[Dict]:
        by_email = {item['candidate']['email']: item['candidate'] for item in matched}
        team = []
        seen = set()

        for selection in selections:
            if not isinstance(selection, dict):
                raise TeamSelectionError("Team entries must be JSON objects")

            email = selection.get('candidate_email')
            if email in seen:
                continue
            candidate = by_email.get(email)
            if candidate is None:
                raise TeamSelectionError(f"Selected candidate with email {email} not found")

            seen.add(email)
            team.append({
                'candidate': candidate,
                'reasons': _as_text_list(selection.get('reasons')),
                'unique_strengths': _as_text_list(selection.get('unique_strengths')),
                'complements_team': str(selection.get('complements_team') or "")
            })

        return team[:self.team_size]

    def select_team(self, requirements: str) -> List[Dict]:
        """
        Main team selection pipeline

        Args:
            requirements: Job requirements text

        Returns:
            Team members with full profile, reasons, unique strengths and team fit

        Raises:
            NoMatchingCandidatesError: If no similar candidate is in the catalog
            TeamSelectionError: If the LLM reply cannot be mapped to a team
        """
        logger.info(f"Selecting team for requirements: {requirements[:100]}...")

        matched = self.match_candidates(requirements)
        if not matched:
            logger.warning("No matching candidates found")
            raise NoMatchingCandidatesError("No matching candidates found")

        prompt = self.build_team_prompt(requirements, matched)
        response_text = self._generate(prompt)

        try:
            selections = parse_json_array(response_text)
        except TeamSelectionError:
            logger.error(f"Failed to parse team selection: {response_text}")
            raise

        team = self._to_team(selections, matched)
        logger.info(f"Selected {len(team)} team members")
        return team


def main():
    """Test team selection engine"""
    logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

    engine = TeamSelectionEngine(
        CandidateVectorStore(),
        CandidateEmbedder(),
        CandidateCatalog.from_file(settings.CANDIDATES_PATH)
    )

    test_requirements = """We are building a fintech data platform and need engineers
    with Python, cloud infrastructure and machine learning experience, plus someone
    who can lead product discussions with business stakeholders."""

    team = engine.select_team(test_requirements)

    print(f"\nTeam for: '{test_requirements[:80]}...'")
    print("=" * 80)
    for i, member in enumerate(team, 1):
        candidate = member['candidate']
        print(f"\n{i}. {candidate['name']} ({candidate['email']})")
        print(f"   Location: {candidate.get('location', '')}")
        for reason in member['reasons']:
            print(f"   - {reason}")
        print(f"   Team fit: {member['complements_team']}")


if __name__ == "__main__":
    main()
