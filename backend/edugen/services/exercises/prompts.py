"""
Generation Prompt Builder

Builds the system and user prompts sent to the text-generation backend.

The system prompt is the subject's pedagogical instructions followed by the
output-format block: the exercise JSON envelope plus the content shape of
every candidate exercise type. The user prompt carries the request details.

Pure functions, no I/O.
"""

from dataclasses import dataclass
from typing import assert_never

from edugen.config.catalog import SubjectConfig
from edugen.enums.exercise import ExerciseType
from edugen.models.exercise import GenerationRequest

# Number of supported types offered when the request names none
DEFAULT_CANDIDATE_TYPES = 3


# ===========================================
# Prompt Templates
# ===========================================

OUTPUT_ENVELOPE = """OUTPUT FORMAT: Return a valid JSON object with this exact structure:
{
  "instruction": "Clear instruction for the student",
  "content": { /* exercise-type specific content, always including "type" */ },
  "solution": {
    "correctAnswer": /* shape depends on the exercise type, see below */,
    "explanation": "detailed explanation",
    "steps": [{ "stepNumber": 1, "description": "step description" }],
    "commonMistakes": ["mistake 1"]
  },
  "hints": ["hint 1", "hint 2"],
  "estimatedTime": 120,
  "tags": ["tag1", "tag2"]
}"""

OUTPUT_FOOTER = "Return ONLY the JSON object, no additional text."

LESSON_CONTEXT_BLOCK = """
LESSON CONTEXT:
- Title: {title}
- Concepts covered: {concepts}{extra}
"""


def content_shape(exercise_type: ExerciseType) -> str:
    """
    Describe the content payload and correctAnswer shape for one type.

    Args:
        exercise_type: Exercise type to describe

    Returns:
        Prompt fragment with a JSON example of the content and the expected
        correctAnswer shape
    """
    match exercise_type:
        case ExerciseType.MULTIPLE_CHOICE:
            return """{
  "type": "multiple-choice",
  "question": "the question",
  "options": [
    { "id": "a", "text": "option text" },
    { "id": "b", "text": "option text" }
  ],
  "multiSelect": false
}
correctAnswer: the id of the correct option, e.g. "b\""""
        case ExerciseType.FILL_BLANK:
            return """{
  "type": "fill-blank",
  "template": "Text with [BLANK] markers",
  "blankCount": 1,
  "wordBank": ["option1", "option2"]
}
correctAnswer: a list of strings, one per blank, e.g. ["answer"]"""
        case ExerciseType.MATCHING:
            return """{
  "type": "matching",
  "leftColumn": [{ "id": "1", "text": "term" }],
  "rightColumn": [{ "id": "a", "text": "definition" }]
}
correctAnswer: an object mapping left ids to right ids, e.g. { "1": "a" }"""
        case ExerciseType.ORDERING:
            return """{
  "type": "ordering",
  "items": [{ "id": "a", "text": "item" }],
  "orderBy": "what the items are ordered by"
}
correctAnswer: the item ids in the correct order joined by commas, e.g. "b,a,c\""""
        case ExerciseType.TRUE_FALSE:
            return """{
  "type": "true-false",
  "statements": [{ "id": "1", "text": "statement" }]
}
correctAnswer: a list of booleans aligned with the statements, e.g. [true, false]"""
        case ExerciseType.SHORT_ANSWER:
            return """{
  "type": "short-answer",
  "question": "the question",
  "maxLength": 100
}
correctAnswer: the expected answer as a short string"""
        case ExerciseType.LONG_ANSWER:
            return """{
  "type": "long-answer",
  "question": "the question",
  "rubricPoints": ["point the answer should cover"],
  "minLength": 100
}
correctAnswer: a model answer as a string"""
        case ExerciseType.PROOF:
            return """{
  "type": "proof",
  "statement": "what must be proven",
  "given": ["given fact"],
  "proofMethod": "direct"
}
correctAnswer: the complete proof as a string"""
        case ExerciseType.CALCULATION:
            return """{
  "type": "calculation",
  "problem": "the problem statement",
  "variables": { "x": 5 },
  "units": "meters",
  "sigFigs": 3
}
correctAnswer: a number, or { "value": 60, "tolerance": 0.5 }"""
        case ExerciseType.TRANSLATION:
            return """{
  "type": "translation",
  "sourceText": "text to translate",
  "sourceLanguage": "en",
  "targetLanguage": "es"
}
correctAnswer: the reference translation as a string"""
        case ExerciseType.CONJUGATION:
            return """{
  "type": "conjugation",
  "verb": "infinitive",
  "language": "es",
  "tense": "present",
  "subjects": ["yo", "tu"]
}
correctAnswer: the conjugated forms as a string"""
        case ExerciseType.CODING:
            return """{
  "type": "coding",
  "description": "what the code must do",
  "language": "python",
  "starterCode": "def solution():\\n    pass",
  "testCases": [{ "input": "1", "expectedOutput": "2" }]
}
correctAnswer: a reference solution as a string"""
        case ExerciseType.DIAGRAM:
            return """{
  "type": "diagram",
  "description": "what the diagram shows and what must be labelled"
}
correctAnswer: the expected labels or description as a string"""
        case ExerciseType.DERIVATION:
            return """{
  "type": "derivation",
  "startingPoint": "given equations",
  "target": "expression to derive"
}
correctAnswer: the final derived expression as a string"""
        case _:
            assert_never(exercise_type)


# ===========================================
# Prompt Assembly
# ===========================================


@dataclass(frozen=True)
class GenerationPrompt:
    """System and user prompt for one generation call."""

    system_prompt: str
    user_prompt: str


def candidate_types(
    request: GenerationRequest, subject_config: SubjectConfig
) -> list[ExerciseType]:
    """Requested types, else the first few types the subject supports."""
    if request.types:
        return list(request.types)
    return list(subject_config.supported_types[:DEFAULT_CANDIDATE_TYPES])


def _build_system_prompt(
    subject_config: SubjectConfig, types: list[ExerciseType]
) -> str:
    shapes = "\n\n".join(
        f"For {t.value} exercises, content should be:\n{content_shape(t)}"
        for t in types
    )
    return f"{subject_config.system_prompt}\n\n{OUTPUT_ENVELOPE}\n\n{shapes}\n\n{OUTPUT_FOOTER}"


def _build_lesson_context(request: GenerationRequest) -> str:
    lesson = request.lesson_context
    if lesson is None:
        return ""

    extra = []
    if lesson.vocabulary:
        extra.append(f"- Vocabulary: {', '.join(lesson.vocabulary)}")
    if lesson.formulas:
        extra.append(f"- Formulas: {', '.join(lesson.formulas)}")
    if lesson.previous_exercises:
        extra.append(
            f"- Do not repeat these earlier exercises: {', '.join(lesson.previous_exercises)}"
        )

    return LESSON_CONTEXT_BLOCK.format(
        title=lesson.title,
        concepts=", ".join(lesson.concepts) or "(none listed)",
        extra="".join(f"\n{line}" for line in extra),
    )


def _build_user_prompt(
    request: GenerationRequest, types: list[ExerciseType]
) -> str:
    difficulty = request.difficulty.value
    options = request.options

    lines = [
        f"Generate a {difficulty} level {request.subject.value} exercise.",
        "",
        "REQUIREMENTS:",
        f"- Topic: {request.topic}",
    ]
    if request.category:
        lines.append(f"- Category: {request.category.value}")
    lines.append(f"- Exercise type: Choose from [{', '.join(t.value for t in types)}]")
    lines.append(f"- Difficulty: {difficulty}")
    if request.language:
        lines.append(f"- Language: {request.language}")
    if request.target_language:
        lines.append(f"- Target language: {request.target_language}")

    if options.include_hints and options.hint_count:
        lines.append(f"- Provide {options.hint_count} progressive hints")
    else:
        lines.append("- Provide no hints (empty hints list)")
    if options.include_common_mistakes:
        lines.append("- List common mistakes in solution.commonMistakes")

    prompt = "\n".join(lines)
    prompt += _build_lesson_context(request)
    if options.custom_instructions:
        prompt += f"\nADDITIONAL INSTRUCTIONS: {options.custom_instructions}"
    prompt += "\n\nGenerate a high-quality exercise that tests understanding of the topic."
    return prompt


def build_generation_prompt(
    request: GenerationRequest, subject_config: SubjectConfig
) -> GenerationPrompt:
    """
    Build the prompts for one exercise generation call.

    Args:
        request: Normalized generation request
        subject_config: Catalog entry for the request's subject

    Returns:
        GenerationPrompt with system and user prompt
    """
    types = candidate_types(request, subject_config)
    return GenerationPrompt(
        system_prompt=_build_system_prompt(subject_config, types),
        user_prompt=_build_user_prompt(request, types),
    )
