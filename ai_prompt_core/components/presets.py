"""Preset tables used by Prompt, Role and Steps."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RolePreset:
    title: str
    expertise: tuple[str, ...] = ()
    traits: tuple[str, ...] = ()
    experience: str | None = None


ROLE_PRESETS: dict[str, RolePreset] = {
    "assistant": RolePreset(title="Assistant", expertise=("general help",)),
    "engineer": RolePreset(
        title="Software Engineer",
        expertise=("software development", "programming", "system design"),
        traits=("analytical", "detail-oriented", "problem-solver"),
        experience="senior",
    ),
    "writer": RolePreset(
        title="Writer",
        expertise=("clear writing", "storytelling", "editing"),
        traits=("creative", "articulate"),
    ),
    "analyst": RolePreset(
        title="Data Analyst",
        expertise=("data analysis", "statistics", "visualization"),
        traits=("analytical", "methodical"),
        experience="senior",
    ),
    "teacher": RolePreset(
        title="Teacher",
        expertise=("explaining concepts", "curriculum design"),
        traits=("patient", "encouraging"),
    ),
    "reviewer": RolePreset(
        title="Code Reviewer",
        expertise=("code quality", "best practices", "security"),
        traits=("thorough", "constructive"),
        experience="senior",
    ),
}

EXPERIENCE_PREFIXES: dict[str, str] = {
    "junior": "a junior ",
    "mid": "a ",
    "senior": "a senior ",
    "expert": "an expert ",
    "principal": "a principal ",
}

ROLE_PREFIX = "You are "

DEFAULT_FORMAT = "markdown"

DEFAULT_CONSTRAINTS: tuple[str, ...] = (
    "Keep responses concise and focused",
    "Be accurate and factual",
    "Acknowledge uncertainty when unsure",
)

STEP_STYLES: dict[str, str] = {
    "step-by-step": "Think through this step by step.",
    "think-aloud": "Reason through your thought process as you work.",
    "structured": "Follow the structured approach below.",
    "minimal": "Consider carefully before answering.",
    "least-to-most": "Start with the simplest version and build up.",
}

AUDIENCE_GUIDANCE: dict[str, str] = {
    "beginner": "Use simple language, avoid jargon, and provide analogies where helpful.",
    "intermediate": "You can use technical terms but provide brief explanations when needed.",
    "advanced": "Use full technical vocabulary and assume strong foundational knowledge.",
    "expert": "Communicate as a peer; no need to explain standard concepts.",
    "mixed": "Provide multiple levels of explanation when covering technical topics.",
}

TONE_DESCRIPTIONS: dict[str, str] = {
    "professional": "Maintain a formal, business-appropriate communication style.",
    "casual": "Use a relaxed, conversational style.",
    "friendly": "Be warm, approachable, and supportive.",
    "academic": "Use scholarly precision with formal structure.",
    "authoritative": "Be confident and decisive in your guidance.",
    "empathetic": "Show understanding and emotional sensitivity.",
    "enthusiastic": "Be energetic and positive.",
    "neutral": "Maintain objectivity and balanced perspective.",
    "humorous": "Use light humor and wit where appropriate.",
    "serious": "Address topics with gravity and importance.",
}

UNCERTAINTY_ACTIONS: dict[str, str] = {
    "ask": "If any part of the request is unclear or ambiguous, ask clarifying questions before answering.",
    "assume": "If any part of the request is unclear, state your assumptions explicitly and proceed.",
    "acknowledge": "If you are unsure about something, say so plainly instead of guessing.",
    "decline": "If you cannot answer with confidence, decline and explain what information is missing.",
}

__all__ = [
    "AUDIENCE_GUIDANCE",
    "DEFAULT_CONSTRAINTS",
    "DEFAULT_FORMAT",
    "EXPERIENCE_PREFIXES",
    "ROLE_PREFIX",
    "ROLE_PRESETS",
    "STEP_STYLES",
    "TONE_DESCRIPTIONS",
    "UNCERTAINTY_ACTIONS",
    "RolePreset",
]
