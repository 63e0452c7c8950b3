"""
REST API for Candidate Team Matching
"""
