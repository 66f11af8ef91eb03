"""
Content Rating Classifier

Assigns an age-appropriateness rating to an exercise from its subject,
category and topic. The rating is always computed here, server-side; a rating
claimed by generated text is never used.

Rules are substring matches on the lowercased topic and category, checked from
most to least restrictive. When nothing matches, the subject default applies.
"""

from typing import Optional

from edugen.enums.exercise import ContentRating, Subject, SubjectCategory

# ===========================================
# Rule Tables (most restrictive first)
# ===========================================

RATING_RULES: list[tuple[ContentRating, tuple[str, ...]]] = [
    (
        ContentRating.AGE_16_PLUS,
        (
            "advanced calculus",
            "differential equations",
            "organic chemistry",
            "biochemistry",
            "quantum physics",
            "nuclear physics",
            "controversial history",
            "genocide",
            "terrorism",
            "philosophy",
            "ethics",
        ),
    ),
    (
        ContentRating.AGE_12_PLUS,
        (
            "algebra",
            "calculus basics",
            "statistics",
            "human biology",
            "genetics",
            "evolution",
            "chemical reactions",
            "periodic table",
            "physics",
            "mechanics",
            "electricity",
            "world wars",
            "modern history",
            "politics",
            "advanced programming",
            "data structures",
        ),
    ),
    (
        ContentRating.AGE_8_PLUS,
        (
            "fractions",
            "decimals",
            "percentages",
            "biology basics",
            "ecosystems",
            "food chains",
            "simple chemistry",
            "states of matter",
            "ancient civilizations",
            "medieval history",
            "programming basics",
            "algorithms",
        ),
    ),
]

SUBJECT_DEFAULT_RATINGS: dict[Subject, ContentRating] = {
    Subject.LANGUAGE: ContentRating.ALL_AGES,
    Subject.MATHEMATICS: ContentRating.ALL_AGES,
    Subject.GEOGRAPHY: ContentRating.ALL_AGES,
    Subject.PHYSICS: ContentRating.AGE_8_PLUS,
    Subject.CHEMISTRY: ContentRating.AGE_8_PLUS,
    Subject.BIOLOGY: ContentRating.AGE_8_PLUS,
    Subject.HISTORY: ContentRating.AGE_8_PLUS,
    Subject.COMPUTER_SCIENCE: ContentRating.AGE_8_PLUS,
}


def determine_content_rating(
    subject: Subject,
    category: Optional[SubjectCategory | str],
    topic: str,
) -> ContentRating:
    """
    Rate an exercise for age-appropriateness.

    Args:
        subject: Exercise subject
        category: Exercise category (may be None)
        topic: Free-text topic

    Returns:
        The most restrictive rating whose keywords appear in the topic or
        category, otherwise the subject's default rating
    """
    haystacks = [topic.lower()]
    if category:
        haystacks.append(getattr(category, "value", category).lower())

    for rating, keywords in RATING_RULES:
        if any(keyword in text for keyword in keywords for text in haystacks):
            return rating

    return SUBJECT_DEFAULT_RATINGS.get(subject, ContentRating.ALL_AGES)
