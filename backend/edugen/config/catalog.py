"""
Subject Catalog

Static per-subject configuration: display name, categories, the exercise
types a subject supports, the pedagogical system prompt used for generation,
and the validation defaults applied to every exercise of that subject.

Usage:
    from edugen.config.catalog import get_subject_config

    config = get_subject_config(Subject.MATHEMATICS)
    config.validation_defaults.passing_score  # 80
"""

from typing import Optional

from pydantic import Field

from edugen.enums.exercise import (
    DifficultyLevel,
    ExerciseType,
    Subject,
    SubjectCategory,
)
from edugen.models.base import WireRecord
from edugen.models.exercise import ValidationRules


class SubjectConfig(WireRecord):
    """Catalog entry for one subject."""

    subject: Subject
    name: str
    description: str
    categories: list[SubjectCategory] = Field(..., min_length=1)
    default_difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    supported_types: list[ExerciseType] = Field(..., min_length=1)
    system_prompt: str = Field(..., exclude=True)
    validation_defaults: ValidationRules


# ===========================================
# Catalog Data
# ===========================================

SUBJECT_CONFIGS: dict[Subject, SubjectConfig] = {
    Subject.LANGUAGE: SubjectConfig(
        subject=Subject.LANGUAGE,
        name="Language Learning",
        description="Vocabulary, grammar, reading, writing, and conversation exercises",
        categories=[
            SubjectCategory.VOCABULARY,
            SubjectCategory.GRAMMAR,
            SubjectCategory.READING,
            SubjectCategory.WRITING,
            SubjectCategory.LISTENING,
            SubjectCategory.CONVERSATION,
            SubjectCategory.ETYMOLOGY,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.FILL_BLANK,
            ExerciseType.MATCHING,
            ExerciseType.ORDERING,
            ExerciseType.TRANSLATION,
            ExerciseType.CONJUGATION,
            ExerciseType.SHORT_ANSWER,
        ],
        system_prompt=(
            "You are an expert language teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Focus on practical, commonly-used vocabulary and grammar\n"
            "- Include context sentences showing real-world usage\n"
            "- Provide clear explanations in the solution\n"
            "- Consider language register (formal/informal)\n"
            "- Include etymology hints for vocabulary when relevant"
        ),
        validation_defaults=ValidationRules(
            passing_score=70, case_sensitive=False, hint_penalty=5
        ),
    ),
    Subject.MATHEMATICS: SubjectConfig(
        subject=Subject.MATHEMATICS,
        name="Mathematics",
        description="Arithmetic, algebra, geometry, calculus, and logic exercises",
        categories=[
            SubjectCategory.ARITHMETIC,
            SubjectCategory.ALGEBRA,
            SubjectCategory.GEOMETRY,
            SubjectCategory.CALCULUS,
            SubjectCategory.STATISTICS,
            SubjectCategory.LOGIC,
            SubjectCategory.NUMBER_THEORY,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.CALCULATION,
            ExerciseType.PROOF,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.FILL_BLANK,
            ExerciseType.ORDERING,
        ],
        system_prompt=(
            "You are an expert mathematics teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Have clear, unambiguous problem statements\n"
            "- Include step-by-step solutions\n"
            "- Use standard mathematical notation\n"
            "- Progress logically from given information to conclusion\n"
            "- Highlight key formulas and theorems used"
        ),
        validation_defaults=ValidationRules(
            passing_score=80, case_sensitive=False, tolerance=0.01, hint_penalty=10
        ),
    ),
    Subject.PHYSICS: SubjectConfig(
        subject=Subject.PHYSICS,
        name="Physics",
        description="Mechanics, thermodynamics, electromagnetism, and quantum physics",
        categories=[
            SubjectCategory.MECHANICS,
            SubjectCategory.THERMODYNAMICS,
            SubjectCategory.ELECTROMAGNETISM,
            SubjectCategory.QUANTUM,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.CALCULATION,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.DIAGRAM,
            ExerciseType.DERIVATION,
        ],
        system_prompt=(
            "You are an expert physics teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Include realistic physical scenarios\n"
            "- Require proper unit analysis\n"
            "- Show derivations from first principles\n"
            "- Include diagrams descriptions when helpful\n"
            "- Connect theory to practical applications"
        ),
        validation_defaults=ValidationRules(
            passing_score=75, case_sensitive=False, tolerance=0.05, hint_penalty=10
        ),
    ),
    Subject.CHEMISTRY: SubjectConfig(
        subject=Subject.CHEMISTRY,
        name="Chemistry",
        description="Organic, inorganic, and biochemistry exercises",
        categories=[
            SubjectCategory.ORGANIC,
            SubjectCategory.INORGANIC,
            SubjectCategory.BIOCHEMISTRY,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.CALCULATION,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.MATCHING,
            ExerciseType.DIAGRAM,
        ],
        system_prompt=(
            "You are an expert chemistry teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Use proper chemical nomenclature\n"
            "- Balance equations correctly\n"
            "- Include molar calculations where appropriate\n"
            "- Describe reaction mechanisms\n"
            "- Connect molecular structure to properties"
        ),
        validation_defaults=ValidationRules(
            passing_score=75, case_sensitive=True, hint_penalty=10
        ),
    ),
    Subject.BIOLOGY: SubjectConfig(
        subject=Subject.BIOLOGY,
        name="Biology",
        description="Genetics, ecology, anatomy, and biochemistry",
        categories=[
            SubjectCategory.GENETICS,
            SubjectCategory.ECOLOGY,
            SubjectCategory.ANATOMY,
            SubjectCategory.BIOCHEMISTRY,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.MATCHING,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.DIAGRAM,
            ExerciseType.ORDERING,
            ExerciseType.TRUE_FALSE,
        ],
        system_prompt=(
            "You are an expert biology teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Use correct scientific terminology\n"
            "- Connect structure to function\n"
            "- Include evolutionary context where relevant\n"
            "- Describe processes step-by-step\n"
            "- Use real-world examples"
        ),
        validation_defaults=ValidationRules(
            passing_score=70, case_sensitive=False, hint_penalty=5
        ),
    ),
    Subject.HISTORY: SubjectConfig(
        subject=Subject.HISTORY,
        name="History",
        description="Ancient, modern, and regional history",
        categories=[
            SubjectCategory.ANCIENT,
            SubjectCategory.MODERN,
            SubjectCategory.REGIONAL,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.ORDERING,
            ExerciseType.MATCHING,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.LONG_ANSWER,
            ExerciseType.TRUE_FALSE,
        ],
        system_prompt=(
            "You are an expert history teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Present multiple perspectives on events\n"
            "- Include primary source references\n"
            "- Connect cause and effect\n"
            "- Place events in broader context\n"
            "- Encourage critical analysis of sources"
        ),
        validation_defaults=ValidationRules(
            passing_score=70, case_sensitive=False, hint_penalty=5
        ),
    ),
    Subject.GEOGRAPHY: SubjectConfig(
        subject=Subject.GEOGRAPHY,
        name="Geography",
        description="Physical and human geography",
        categories=[SubjectCategory.REGIONAL],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.MATCHING,
            ExerciseType.DIAGRAM,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.TRUE_FALSE,
        ],
        system_prompt=(
            "You are an expert geography teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Include map reading skills\n"
            "- Connect physical and human geography\n"
            "- Use current data and statistics\n"
            "- Consider environmental factors\n"
            "- Include regional comparisons"
        ),
        validation_defaults=ValidationRules(
            passing_score=70, case_sensitive=False, hint_penalty=5
        ),
    ),
    Subject.COMPUTER_SCIENCE: SubjectConfig(
        subject=Subject.COMPUTER_SCIENCE,
        name="Computer Science",
        description="Algorithms, data structures, and systems",
        categories=[
            SubjectCategory.ALGORITHMS,
            SubjectCategory.DATA_STRUCTURES,
            SubjectCategory.SYSTEMS,
        ],
        supported_types=[
            ExerciseType.MULTIPLE_CHOICE,
            ExerciseType.CODING,
            ExerciseType.SHORT_ANSWER,
            ExerciseType.ORDERING,
            ExerciseType.TRUE_FALSE,
            ExerciseType.CALCULATION,
        ],
        system_prompt=(
            "You are an expert computer science teacher creating educational exercises.\n"
            "Generate exercises that:\n"
            "- Include clear input/output specifications\n"
            "- Consider time and space complexity\n"
            "- Provide test cases for code\n"
            "- Explain algorithms step-by-step\n"
            "- Use standard pseudocode or common languages"
        ),
        validation_defaults=ValidationRules(
            passing_score=80, case_sensitive=True, hint_penalty=10
        ),
    ),
}


def get_subject_config(subject: Subject | str) -> Optional[SubjectConfig]:
    """
    Look up the catalog entry for a subject.

    Args:
        subject: Subject enum or its wire value

    Returns:
        SubjectConfig, or None if the subject is not in the catalog
    """
    try:
        return SUBJECT_CONFIGS.get(Subject(subject))
    except ValueError:
        return None
