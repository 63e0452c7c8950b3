"""
Candidate Embedder

Turns candidate descriptions and job requirements into vectors with Gemini embeddings.
"""

import logging
from typing import List, Optional
import google.generativeai as genai

from config import settings

logger = logging.getLogger(__name__)


class CandidateEmbedder:
    """
    Thin wrapper around the Gemini embeddings endpoint
    """
    
    def __init__(self, api_key: Optional[str] = None, model: str = settings.EMBEDDING_MODEL):
        """
        Initialize embedder
        
        Args:
            api_key: Gemini API key (falls back to GEMINI_API_KEY)
            model: Embedding model name
        """
        api_key = api_key or settings.GEMINI_API_KEY
        if not api_key:
            raise ValueError("GEMINI_API_KEY not found in environment")
        
        genai.configure(api_key=api_key)
        self.model = model
        
        logger.info(f"Initialized embedder with model {model}")
    
    def _embed(self, text: str, task_type: str) -> List[float]:
        try:
            response = genai.embed_content(
                model=self.model,
                content=text,
                task_type=task_type
            )
            return list(response['embedding'])
        except Exception as e:
            logger.error(f"Error creating embedding: {str(e)}")
            raise
    
    def embed_document(self, text: str) -> List[float]:
        """Embed a candidate description for storage in the index"""
        return self._embed(text, "retrieval_document")
    
    def embed_query(self, text: str) -> List[float]:
        """Embed job requirements for searching the index"""
        return self._embed(text, "retrieval_query")
