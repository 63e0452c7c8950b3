"""
FastAPI REST API for Candidate Team Matching

Endpoints:
- GET /health - Health check
- POST /api/create-embedding - Embed arbitrary text
- POST /api/query-candidates - Similar candidates for job requirements
- POST /api/match-candidates - Diverse team selected from similar candidates
"""

import logging
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from config import settings
from embedding.embedder import CandidateEmbedder
from embedding.vectorstore import CandidateVectorStore
from recommender.engine import (
    CandidateCatalog,
    NoMatchingCandidatesError,
    TeamSelectionEngine,
    TeamSelectionError
)

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Candidate Team Matcher API",
    description="Semantic candidate search and diverse team selection",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global engine instance
engine: Optional[TeamSelectionEngine] = None


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Pydantic models
class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="API status")
    message: str = Field(..., description="Status message")
    candidates_count: Optional[int] = Field(None, description="Number of candidates indexed")


class EmbeddingRequest(BaseModel):
    """Request model for text embeddings"""
    text: str = Field(..., description="Text to embed")

    check_text = field_validator("text")(_not_blank)


class EmbeddingResponse(BaseModel):
    """Response model for text embeddings"""
    embedding: List[float] = Field(..., description="Embedding vector")


class QueryRequest(BaseModel):
    """Request model for similar-candidate search"""
    requirements: str = Field(..., description="Job requirements")
    limit: int = Field(20, description="Maximum number of matches", ge=1, le=100)

    check_requirements = field_validator("requirements")(_not_blank)


class CandidateMatch(BaseModel):
    """Candidate returned by similarity search"""
    id: str = Field(..., description="Candidate email")
    score: float = Field(..., description="Cosine similarity")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Indexed candidate summary")


class MatchRequest(BaseModel):
    """Request model for team selection"""
    requirements: str = Field(..., description="Job requirements")

    check_requirements = field_validator("requirements")(_not_blank)


class TeamMember(BaseModel):
    """Selected team member"""
    candidate: Dict[str, Any] = Field(..., description="Full candidate profile")
    reasons: List[str] = Field(default_factory=list, description="Why the candidate was chosen")
    unique_strengths: List[str] = Field(default_factory=list, description="Strengths brought to the team")
    complements_team: str = Field("", description="How the candidate complements the others")


class TeamResponse(BaseModel):
    """Response model for team selection"""
    requirements: str = Field(..., description="Original job requirements")
    team: List[TeamMember] = Field(..., description="Selected team members")
    total_members: int = Field(..., description="Number of team members returned")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 Bad Request"""
    # JSON decode errors carry a character offset rather than a field name
    fields = sorted({
        err["loc"][-1] for err in exc.errors()
        if err.get("loc") and isinstance(err["loc"][-1], str) and err["loc"][-1] != "body"
    })
    detail = f"Invalid {', '.join(fields)} data" if fields else "Invalid request data"
    return JSONResponse(status_code=400, content={"detail": detail})


@app.on_event("startup")
async def startup_event():
    """Initialize the team selection engine on startup"""
    global engine

    try:
        logger.info("Initializing team selection engine...")

        vector_store = CandidateVectorStore()
        catalog = CandidateCatalog.from_file(settings.CANDIDATES_PATH)

        if vector_store.get_count() == 0:
            logger.warning("Candidate index is empty, run import-candidates first")
        else:
            logger.info(f"Candidate index contains {vector_store.get_count()} candidates")

        engine = TeamSelectionEngine(vector_store, CandidateEmbedder(), catalog)
        logger.info("Team selection engine initialized successfully")

    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise


def get_engine() -> TeamSelectionEngine:
    if not engine:
        raise HTTPException(
            status_code=503,
            detail="Team selection engine not initialized"
        )
    return engine


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint

    Returns API status and basic information
    """
    try:
        candidates_count = engine.vector_store.get_count() if engine else 0

        return HealthResponse(
            status="healthy",
            message="Candidate Team Matcher API is running",
            candidates_count=candidates_count
        )
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        return HealthResponse(
            status="unhealthy",
            message=f"Error: {str(e)}"
        )


@app.post("/api/create-embedding", response_model=EmbeddingResponse)
def create_embedding(request: EmbeddingRequest):
    """Embed text with the query embedding model"""
    current = get_engine()

    try:
        return EmbeddingResponse(embedding=current.create_embedding(request.text))
    except Exception as e:
        logger.error(f"Error creating embedding: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create embedding")


@app.post("/api/query-candidates", response_model=List[CandidateMatch])
def query_candidates(request: QueryRequest):
    """
    Get the candidates most similar to the job requirements

    Args:
        request: Requirements and maximum number of matches

    Returns:
        Matches ordered by similarity
    """
    current = get_engine()

    try:
        matches = current.query_candidates(request.requirements, limit=request.limit)
        logger.info(f"Returned {len(matches)} matches")
        return [CandidateMatch(**match) for match in matches]
    except Exception as e:
        logger.error(f"Error querying candidates: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to query candidates")


@app.post("/api/match-candidates", response_model=TeamResponse)
def match_candidates(request: MatchRequest):
    """
    Select a diverse team for the job requirements

    Args:
        request: Job requirements

    Returns:
        Team members with full profiles and selection reasoning
    """
    current = get_engine()

    try:
        team = current.select_team(request.requirements)
    except NoMatchingCandidatesError:
        raise HTTPException(status_code=404, detail="No matching candidates found")
    except TeamSelectionError as e:
        logger.error(f"Error parsing team selection: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to parse AI response")
    except Exception as e:
        logger.error(f"Error matching candidates: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to match candidates")

    logger.info(f"Returned team of {len(team)}")
    return TeamResponse(
        requirements=request.requirements,
        team=[TeamMember(**member) for member in team],
        total_members=len(team)
    )


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": "Candidate Team Matcher API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "create_embedding": "/api/create-embedding (POST)",
            "query_candidates": "/api/query-candidates (POST)",
            "match_candidates": "/api/match-candidates (POST)",
            "docs": "/docs"
        }
    }


def run():
    """Serve the API with uvicorn"""
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
