import re
from typing import Dict, List

from .schemas import SECTIONS, AnalysisResult

# One heading-like marker per section. First match wins; the order of
# sections inside the document is not considered.
SECTION_PATTERNS = {
    "contact": re.compile(r"(?:email|phone|address):", re.IGNORECASE),
    "education": re.compile(r"(?:education|university|college|degree):", re.IGNORECASE),
    "experience": re.compile(r"(?:experience|work|employment):", re.IGNORECASE),
    "skills": re.compile(r"(?:skills|technologies|programming|languages):", re.IGNORECASE),
    "projects": re.compile(r"(?:projects|portfolio):", re.IGNORECASE),
    "achievements": re.compile(r"(?:achievements|awards|accomplishments):", re.IGNORECASE),
}

ACTION_VERBS = ("led", "developed", "created", "managed", "implemented", "designed", "achieved")

MIN_SECTION_WORDS = 20
MIN_TOTAL_WORDS = 200
MAX_TOTAL_WORDS = 1000
MIN_ACTION_VERBS = 5


def score_section(exists: bool, word_count: int) -> int:
    if not exists:
        return 0
    if word_count < 20:
        return 40
    if word_count < 50:
        return 70
    if word_count < 100:
        return 90
    return 100


def _count_words(text: str) -> int:
    # Leading whitespace adds no empty token, so "" counts as 0 words
    return len(text.split())


def _section_content(text: str, pattern: re.Pattern) -> str:
    """Text between the first and second marker match, cut at the first blank line."""
    parts = pattern.split(text)
    if len(parts) < 2:
        return ""
    return parts[1].split("\n\n")[0]


def count_action_verbs(text: str) -> int:
    """Case-insensitive substring count of every action verb across *text*."""
    lowered = text.lower()
    return sum(lowered.count(verb) for verb in ACTION_VERBS)


def analyze_text(text: str) -> AnalysisResult:
    """Score plain resume text against the fixed section heuristics.

    Pure and deterministic: the same text always yields an equal result.
    """
    scores: Dict[str, int] = {}
    findings: List[str] = []
    recommendations: List[str] = []

    for section in SECTIONS:
        pattern = SECTION_PATTERNS[section]
        exists = pattern.search(text) is not None
        word_count = _count_words(_section_content(text, pattern))

        scores[section] = score_section(exists, word_count)

        if not exists:
            recommendations.append(f"Add a {section} section to your resume")
        elif word_count < MIN_SECTION_WORDS:
            recommendations.append(f"Expand your {section} section with more details")
        else:
            findings.append(f"Strong {section} section with {word_count} words")

    total_words = _count_words(text)
    if total_words < MIN_TOTAL_WORDS:
        recommendations.append("Your resume seems too brief. Add more detailed information.")
    elif total_words > MAX_TOTAL_WORDS:
        recommendations.append("Consider condensing your resume to be more concise.")

    verb_count = count_action_verbs(text)
    if verb_count < MIN_ACTION_VERBS:
        recommendations.append("Use more action verbs to describe your achievements")
    else:
        findings.append(f"Good use of action verbs ({verb_count} found)")

    # Section scores are multiples of ten, so the mean never lands on .5
    overall = round(sum(scores.values()) / len(scores))

    return AnalysisResult(
        overall_score=overall,
        scores=scores,
        findings=findings,
        recommendations=recommendations,
    )
