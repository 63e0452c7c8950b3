"""Environment-driven settings for the Candidate Team Matcher"""
