"""
Exercise Domain Enums

Defines the closed sets the engine dispatches on: subjects, categories,
difficulty levels, exercise types, content ratings and backend tiers.
"""

from enum import Enum


class Subject(str, Enum):
    """Subjects with a catalog entry."""

    LANGUAGE = "language"
    MATHEMATICS = "mathematics"
    PHYSICS = "physics"
    CHEMISTRY = "chemistry"
    BIOLOGY = "biology"
    HISTORY = "history"
    GEOGRAPHY = "geography"
    COMPUTER_SCIENCE = "computer-science"


class SubjectCategory(str, Enum):
    """Categories across all subjects (see catalog for per-subject lists)."""

    # Language
    VOCABULARY = "vocabulary"
    GRAMMAR = "grammar"
    READING = "reading"
    WRITING = "writing"
    LISTENING = "listening"
    CONVERSATION = "conversation"
    ETYMOLOGY = "etymology"

    # Mathematics
    ARITHMETIC = "arithmetic"
    ALGEBRA = "algebra"
    GEOMETRY = "geometry"
    CALCULUS = "calculus"
    STATISTICS = "statistics"
    LOGIC = "logic"
    NUMBER_THEORY = "number-theory"

    # Sciences
    MECHANICS = "mechanics"
    THERMODYNAMICS = "thermodynamics"
    ELECTROMAGNETISM = "electromagnetism"
    QUANTUM = "quantum"
    ORGANIC = "organic"
    INORGANIC = "inorganic"
    BIOCHEMISTRY = "biochemistry"
    GENETICS = "genetics"
    ECOLOGY = "ecology"
    ANATOMY = "anatomy"

    # Other
    ANCIENT = "ancient"
    MODERN = "modern"
    REGIONAL = "regional"
    ALGORITHMS = "algorithms"
    DATA_STRUCTURES = "data-structures"
    SYSTEMS = "systems"


class DifficultyLevel(str, Enum):
    """
    Ordered difficulty levels.

    Declaration order is the difficulty order; maxPoints and default
    estimated time grow monotonically along it.
    """

    BEGINNER = "beginner"
    ELEMENTARY = "elementary"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class ExerciseType(str, Enum):
    """
    Closed set of exercise types.

    The content payload and the solution answer shape depend on the type:
    - MULTIPLE_CHOICE: option id string
    - FILL_BLANK: list of strings, one per blank
    - MATCHING: {leftId: rightId} map
    - TRUE_FALSE: list of booleans aligned with the statements
    - CALCULATION: number or {value, tolerance}
    - everything else: free or structured text
    """

    MULTIPLE_CHOICE = "multiple-choice"
    FILL_BLANK = "fill-blank"
    MATCHING = "matching"
    ORDERING = "ordering"
    TRUE_FALSE = "true-false"
    SHORT_ANSWER = "short-answer"
    LONG_ANSWER = "long-answer"
    PROOF = "proof"
    CALCULATION = "calculation"
    TRANSLATION = "translation"
    CONJUGATION = "conjugation"
    DIAGRAM = "diagram"
    CODING = "coding"
    DERIVATION = "derivation"


class ContentRating(str, Enum):
    """Age-appropriateness ratings, least to most restrictive."""

    ALL_AGES = "all-ages"
    AGE_8_PLUS = "age-8-plus"
    AGE_12_PLUS = "age-12-plus"
    AGE_16_PLUS = "age-16-plus"
    ADULT = "adult"


class ModelTier(str, Enum):
    """Backend preference a caller may express in generation options."""

    DEFAULT = "default"
    QUALITY = "quality"
    REASONING = "reasoning"


class BackendErrorKind(str, Enum):
    """
    Classification of a failed inference call.

    Every kind advances the fallback chain; the kind is recorded for logs
    and response diagnostics.
    """

    TRANSIENT = "transient"  # rate limited / quota exhausted
    UNAVAILABLE = "unavailable"  # model not found / invalid model
    UNKNOWN = "unknown"
