"""
Team Selection

Retrieves similar candidates and asks Gemini to assemble a diverse team.
"""
