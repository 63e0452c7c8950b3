"""
Streamlit front end for the Candidate Team Matcher
"""
