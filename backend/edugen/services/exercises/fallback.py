"""
Static Fallback Generator

Builds a placeholder multiple-choice exercise when every backend in the chain
has failed. The placeholder is clearly marked (``metadata.fallback``,
``generatedBy = "static-fallback"``) so clients can tell it apart.

Pure apart from minting the id and timestamp; never raises.
"""

from datetime import datetime, timezone

from edugen.config.catalog import SubjectConfig
from edugen.models.exercise import (
    Exercise,
    ExerciseMetadata,
    ExerciseProblem,
    ExerciseSolution,
    GenerationRequest,
    LabeledItem,
    MultipleChoiceContent,
)
from edugen.enums.exercise import ExerciseType
from edugen.services.exercises.defaults import (
    DEFAULT_ESTIMATED_TIME,
    DIFFICULTY_POINTS,
    exercise_language,
    generate_exercise_id,
    resolve_category,
)
from edugen.services.exercises.rating import determine_content_rating

FALLBACK_MODEL = "static-fallback"
FALLBACK_CORRECT_OPTION = "a"

FALLBACK_HINTS = [
    "This is a placeholder exercise because generation is temporarily unavailable.",
    "Please try again in a few moments to get a full exercise on this topic.",
]


def build_fallback_exercise(
    request: GenerationRequest, subject_config: SubjectConfig
) -> Exercise:
    """
    Build the placeholder exercise for a request.

    Args:
        request: Normalized generation request
        subject_config: Catalog entry for the request's subject

    Returns:
        Multiple-choice Exercise with correct option "a"
    """
    now = datetime.now(timezone.utc)
    category = resolve_category(request, subject_config)

    content = MultipleChoiceContent(
        question=(
            f"Exercise generation for '{request.topic}' is temporarily unavailable. "
            "Which option lets you continue practicing?"
        ),
        options=[
            LabeledItem(id="a", text="Try generating the exercise again later"),
            LabeledItem(id="b", text="Skip this topic"),
            LabeledItem(id="c", text="Review the lesson material first"),
        ],
        multi_select=False,
    )

    return Exercise(
        id=generate_exercise_id(
            request.subject.value,
            request.category.value if request.category else None,
            now,
        ),
        subject=request.subject,
        category=category,
        difficulty=request.difficulty,
        type=ExerciseType.MULTIPLE_CHOICE,
        topic=request.topic,
        problem=ExerciseProblem(
            instruction="Complete the exercise below.",
            content=content,
            max_points=DIFFICULTY_POINTS[request.difficulty],
        ),
        solution=ExerciseSolution(
            correct_answer=FALLBACK_CORRECT_OPTION,
            explanation=(
                "This placeholder was served because no generation backend was "
                "available. Request a new exercise to practice this topic."
            ),
        ),
        hints=list(FALLBACK_HINTS),
        validation=subject_config.validation_defaults,
        metadata=ExerciseMetadata(
            created_at=now,
            generated_by=FALLBACK_MODEL,
            content_rating=determine_content_rating(
                request.subject, category, request.topic
            ),
            source_lesson=request.lesson_context.title if request.lesson_context else None,
            tags=[request.topic, request.subject.value],
            estimated_time=DEFAULT_ESTIMATED_TIME[request.difficulty],
            language=exercise_language(request),
            fallback=True,
        ),
    )
