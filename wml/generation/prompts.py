"""
Adaptive Course Generation Prompt.

Builds the course-generation prompt from a learner profile and their
performance record. The record is read-only input here: difficulty, tier,
streak health and topic strengths come straight from the engine's output.

Sections:
1. Student profile (age band guidance + language guidance)
2. Performance context (only once the learner has completed a lesson)
3. Content style (primary/secondary modality instructions)
4. Requirements and the exact JSON output format
"""
from __future__ import annotations

from wml.adaptive.modality import rank_modalities
from wml.adaptive.models import Difficulty, Modality, PerformanceHistory
from wml.generation.profile import LearningProfile

# =============================================================================
# Modality Instructions
# =============================================================================

MODALITY_INSTRUCTIONS: dict[Modality, str] = {
    Modality.VISUAL: (
        "Include many diagrams described in text, visual metaphors, charts, and image descriptions. "
        "Use markdown image placeholders with descriptive alt texts. "
        "Format content with tables and structured layouts."
    ),
    Modality.READING: (
        "Provide detailed written explanations, definitions, and note-style summaries. "
        "Include key takeaways and vocabulary lists. Use bullet points and numbered lists heavily."
    ),
    Modality.HANDSON: (
        "Include practical exercises, experiments, and hands-on activities within lessons. "
        "Add 'Try It Yourself' sections. Frame content as step-by-step projects."
    ),
    Modality.LISTENING: (
        "Write content in a conversational, narration-friendly tone. "
        "Include dialogue-style explanations and think-aloud walkthroughs. "
        "Keep sentences clear and spoken-word friendly."
    ),
}

DIFFICULTY_HINTS: dict[Difficulty, str] = {
    Difficulty.BEGINNER: "keep it accessible",
    Difficulty.INTERMEDIATE: "balanced difficulty",
    Difficulty.ADVANCED: "challenge them",
}

# =============================================================================
# Output Format
# =============================================================================

COURSE_JSON_FORMAT = """{{
    "title": "Course Title",
    "description": "Brief engaging description",
    "learningObjectives": ["objective1", "objective2", "objective3"],
    "lessons": [
        {{
            "id": "lesson_1",
            "title": "Lesson Title",
            "content": "Full lesson content in markdown format...",
            "duration": 5,
            "contentType": "{primary}",
            "visualAssets": [
                {{
                    "type": "image",
                    "url": "https://example.com/asset.jpg",
                    "caption": "What this visual explains",
                    "altText": "Descriptive alt text for accessibility"
                }}
            ],
            "quiz": [
                {{
                    "question": "Question text?",
                    "options": ["A", "B", "C", "D"],
                    "correctAnswer": 0,
                    "explanation": "Why A is correct"
                }}
            ]
        }}
    ],
    "metadata": {{
        "difficulty": "{difficulty}",
        "targetAge": "{age}",
        "language": "{language}",
        "primaryModality": "{primary}",
        "gradeLevel": "{grade_level}"
    }}
}}"""


def _age_instructions(profile: LearningProfile) -> str:
    text = f"The student is {profile.age} years old, in {profile.grade_level} ({profile.country})."
    if profile.age <= 8:
        return text + " Use very simple language, short sentences, fun analogies, and lots of emoji. Make it playful and game-like."
    if profile.age <= 12:
        return text + " Use clear, engaging language with real-world examples they can relate to. Include fun facts and interesting connections."
    if profile.age <= 16:
        return text + " Use slightly more advanced vocabulary. Include real-world applications, current events connections, and critical thinking prompts."
    return text + " Use mature, academic language. Include in-depth analysis, research references, and complex problem-solving."


def _language_instructions(profile: LearningProfile) -> str:
    text = f"Write the course in {profile.language}."
    if profile.language.lower() == "english" or not profile.english_level:
        return text
    if profile.english_level == "beginner":
        return text + (
            " The student is a beginner in English. Use simple English terms only when necessary "
            f"for technical vocabulary, and provide the {profile.language} translation in parentheses."
        )
    if profile.english_level == "intermediate":
        return text + " The student has intermediate English. You may use common English terms but explain complex vocabulary."
    return text


def _performance_context(history: PerformanceHistory) -> str:
    if history.total_lessons_completed <= 0:
        return ""
    lines = [
        "The student's current performance:",
        f"- Average quiz score: {history.average_quiz_score:.0f}% "
        f"({DIFFICULTY_HINTS[history.current_difficulty]})",
        f"- Lessons completed: {history.total_lessons_completed}",
        f"- Learner tier: {history.learner_tier.value} (tier score {history.tier_score:.0f})",
        f"- Recent trend: {history.trend.value}",
        f"- Streak health: {history.streak_health.value}",
    ]
    if history.strong_topics:
        lines.append(
            f"- Strong in: {', '.join(history.strong_topics)} "
            "(reference these to build bridges to new concepts)"
        )
    if history.weak_topics:
        lines.append(
            f"- Needs improvement in: {', '.join(history.weak_topics)} "
            "(include extra scaffolding for related concepts)"
        )
    return "\n".join(lines)


def build_adaptive_course_prompt(
    profile: LearningProfile,
    history: PerformanceHistory,
    topic: str,
) -> str:
    """
    Build the full course-generation prompt for one learner and topic.

    Args:
        profile: Learner profile from onboarding
        history: Learner's current performance record
        topic: Requested course topic

    Returns:
        Prompt text ready to send to the generation backend
    """
    ranked = rank_modalities(history.modality_scores, profile.learning_styles)
    primary, secondary = ranked[0], ranked[1]
    difficulty = history.current_difficulty.value

    sections = [
        "You are an expert adaptive course creator for WML (WeMakeLessons). "
        "Generate a complete educational course tailored to this specific student.",
        "",
        "STUDENT PROFILE:",
        _age_instructions(profile),
        _language_instructions(profile),
    ]
    performance = _performance_context(history)
    if performance:
        sections += ["", performance]

    sections += [
        "",
        "CONTENT STYLE:",
        f"Primary modality: {primary.value} - {MODALITY_INSTRUCTIONS[primary]}",
        f"Secondary modality: {secondary.value} - {MODALITY_INSTRUCTIONS[secondary]}",
        "",
        f'COURSE TOPIC: "{topic.strip()}"',
        f"DIFFICULTY LEVEL: {difficulty}",
        "",
        "REQUIREMENTS:",
        "- Generate 4-6 lessons, each with 3-5 quiz questions",
        f"- Each lesson should primarily use {primary.value} modality with {secondary.value} as secondary",
        f'- Difficulty should match "{difficulty}" level calibrated for {profile.grade_level or "the student"}',
        "- Include engaging, age-appropriate examples",
        "- Include visual learning support in every lesson with at least 2 visual assets (images, GIFs, or videos)",
        "- Quiz questions should test understanding, not just memorization",
        "- Include explanations for correct answers",
        "",
        "IMPORTANT: Return ONLY valid JSON in this exact format, no markdown code blocks:",
        COURSE_JSON_FORMAT.format(
            primary=primary.value,
            difficulty=difficulty,
            age=profile.age,
            language=profile.language,
            grade_level=profile.grade_level,
        ),
    ]
    return "\n".join(sections)
