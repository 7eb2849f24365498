import logging

QUESTIONS_SYSTEM_INSTRUCTION = """You are an expert interviewer running auditions for a college club. You ask practical, scenario-based questions that reveal how a candidate thinks on their feet."""

# Theme hints per position, keyed by the upper-cased label
QUESTION_THEMES = {
    "ANCHOR": [
        "On-spot anchoring",
        "Sudden topic change",
        "Crowd control situations",
        "Live event mishaps",
    ],
    "CREATIVE DESIGNER": [
        "Design a poster on the spot",
        "Redesign critique",
        "Color psychology",
        "Branding consistency",
    ],
    "VIDEO EDITOR": [
        "Editing raw footage",
        "Fixing bad audio/video",
        "Short-form vs long-form edits",
        "Content pacing",
    ],
    "LOGISTICS & OPERATIONS": [
        "Last-minute venue change",
        "Speaker delay",
        "Crowd overflow",
        "Budget constraint handling",
    ],
}


def _format_themes() -> str:
    blocks = []
    for i, (position, themes) in enumerate(QUESTION_THEMES.items(), start=1):
        lines = "\n".join(f"    * {theme}" for theme in themes)
        blocks.append(f"    **{i}. {position}**\n{lines}")
    return "\n\n".join(blocks)


def get_interview_questions_prompt(preferred_position: str) -> str:
    """
    Generate interview questions prompt
    """
    position = preferred_position.strip().upper()
    logging.info(f"Generating interview questions prompt | position={position!r}")
    return f"""Based on the candidate's preferred position and the corresponding question themes, suggest 5-7 relevant and insightful interview questions.

    ### Role-Specific Question Themes

{_format_themes()}

    ---

    **Candidate's Preferred Position:** {position}

    ---

    Generate questions based on the themes for the specified position. If the position is not listed, write questions that test the skills that position needs in a live event setting.

    Return ONLY this JSON format (no markdown, no code blocks):
    {{"questions": ["Question 1", "Question 2", "Question 3"]}}"""
