"""
Vector Store for Candidate Profiles

Handles embedding generation and similarity search using Chroma and Gemini embeddings.
"""

__version__ = "1.0.0"
