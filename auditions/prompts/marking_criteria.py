import logging

CRITERIA_SYSTEM_INSTRUCTION = """You are an expert HR manager creating audition scorecards for a college club. You design a small set of clear, observable marking criteria that a panel can score live during a short interview."""


def get_marking_criteria_prompt(preferred_position: str) -> str:
    """
    Generate marking criteria prompt for a position without a fixed schema
    """
    logging.info(f"Generating marking criteria prompt | position={preferred_position!r}")
    return f"""Create a marking scheme for a candidate auditioning for the position below.

    Candidate's Preferred Position: {preferred_position}

    RULES:
    - Return 4 to 6 criteria that are specific to this position.
    - Each criterion has a short name and a maximum score.
    - The maximum scores MUST add up to exactly 100.
    - Every maximum score must be a positive whole number.

    EXAMPLE for "ANCHOR":
    {{
      "criteria": [
        {{"criterion": "Communication Clarity", "maxScore": 20}},
        {{"criterion": "Confidence & Stage Presence", "maxScore": 20}},
        {{"criterion": "Spontaneity", "maxScore": 20}},
        {{"criterion": "Audience Engagement", "maxScore": 20}},
        {{"criterion": "Language & Tone Control", "maxScore": 20}}
      ]
    }}

    Return ONLY this JSON format (no markdown, no code blocks):
    {{"criteria": [{{"criterion": "", "maxScore": 0}}]}}"""
