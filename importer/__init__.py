"""
Candidate Import

Loads candidate profiles into the vector index.
"""
