"""
Answer Scoring Engine

Grades a submitted answer against an exercise's solution. Pure: no I/O, and
the same inputs always give the same result.

Steps:
    1. Type-specific raw score in [0, 100]
       - multiple-choice: exact option id match (100 or 0)
       - fill-blank: per blank, case rules and alternatives apply
       - true-false: per statement, positional
       - calculation: numeric, relative tolerance for a bare number,
         absolute tolerance for {value, tolerance}; trailing units in a
         submitted string are ignored
       - matching: per left id
       - all other types: text equality or any listed alternative
    2. Partial scores become 0 when partial credit is disabled
    3. Subtract hintsUsed × hintPenalty
    4. Subtract overtime × timePenalty when a time limit was exceeded and a
       time penalty is configured
    5. Clamp to [0, 100]; pass iff score ≥ passingScore, decided before
       rounding: 69.6 against a passing score of 70 is reported as score 70
       and still fails
    6. points = round-half-up(score / 100 × maxPoints)
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, assert_never

from edugen.enums.exercise import ExerciseType
from edugen.models.exercise import (
    Exercise,
    SubmissionResult,
    ToleranceAnswer,
    ValidationRules,
    leading_number,
)

DEFAULT_RELATIVE_TOLERANCE = 0.01

# Solutions are revealed after a pass or a clear miss
SHOW_SOLUTION_BELOW = 30


@dataclass(frozen=True)
class RawScore:
    """Type-specific score before penalties."""

    score: float
    feedback: str
    partial: bool = False


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _normalize_text(value: Any, case_sensitive: bool) -> str:
    text = "" if value is None else str(value).strip()
    return text if case_sensitive else text.lower()


def _alternatives(validation: ValidationRules) -> set[str]:
    return {
        _normalize_text(alt, validation.case_sensitive)
        for alt in validation.alternatives or []
    }


def _parse_number(value: Any) -> Optional[float]:
    """
    Parse a value as a finite number, or None.

    Strings are read up to the end of their leading number, so units after
    it ("60.3 km/h") are ignored.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = leading_number(value)
        if number is None:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _fraction_feedback(correct: int, total: int) -> str:
    return f"You got {correct} out of {total} correct."


# ===========================================
# Type-specific comparators
# ===========================================


def _score_multiple_choice(correct: Any, answer: Any) -> RawScore:
    expected = _answer_text(correct)
    if answer is not None and _answer_text(answer) == expected:
        return RawScore(100, "Correct!")
    return RawScore(0, f"Incorrect. The correct answer was: {expected}")


def _score_fill_blank(
    correct: Any, answer: Any, validation: ValidationRules
) -> RawScore:
    expected = correct if isinstance(correct, list) else [correct]
    given = answer if isinstance(answer, list) else [answer]
    if not expected:
        return RawScore(0, _fraction_feedback(0, 0))

    alternatives = _alternatives(validation)
    matched = 0
    for i, expected_value in enumerate(expected):
        submitted = _normalize_text(given[i] if i < len(given) else "", validation.case_sensitive)
        target = _normalize_text(expected_value, validation.case_sensitive)
        if submitted and (submitted == target or submitted in alternatives):
            matched += 1

    return RawScore(
        100 * matched / len(expected),
        _fraction_feedback(matched, len(expected)),
        partial=0 < matched < len(expected),
    )


def _score_true_false(correct: Any, answer: Any) -> RawScore:
    if not isinstance(correct, list) or not correct or not isinstance(answer, list):
        return RawScore(0, _fraction_feedback(0, len(correct) if isinstance(correct, list) else 0))

    matched = sum(
        1
        for i, expected in enumerate(correct)
        if i < len(answer) and isinstance(answer[i], bool) and answer[i] == expected
    )
    return RawScore(
        100 * matched / len(correct),
        _fraction_feedback(matched, len(correct)),
        partial=0 < matched < len(correct),
    )


def _score_calculation(
    correct: Any, answer: Any, validation: ValidationRules
) -> RawScore:
    submitted = _parse_number(answer)

    if isinstance(correct, ToleranceAnswer):
        target, allowed = correct.value, correct.tolerance
    else:
        # Exercise validation guarantees a numeric reference answer
        target = _parse_number(correct)
        tolerance = validation.tolerance or DEFAULT_RELATIVE_TOLERANCE
        allowed = tolerance * abs(target)

    if submitted is not None and abs(submitted - target) <= allowed:
        return RawScore(100, "Correct!")
    return RawScore(0, f"Incorrect. The correct answer was: {target:g}")


def _score_matching(correct: Any, answer: Any) -> RawScore:
    if not isinstance(correct, dict) or not correct:
        return RawScore(0, "You matched 0 out of 0 pairs correctly.")
    given = answer if isinstance(answer, dict) else {}

    matched = sum(1 for left, right in correct.items() if given.get(left) == right)
    return RawScore(
        100 * matched / len(correct),
        f"You matched {matched} out of {len(correct)} pairs correctly.",
        partial=0 < matched < len(correct),
    )


def _score_text(correct: Any, answer: Any, validation: ValidationRules) -> RawScore:
    expected = _normalize_text(_answer_text(correct), validation.case_sensitive)
    given = _normalize_text(_answer_text(answer), validation.case_sensitive)

    if given and given == expected:
        return RawScore(100, "Correct!")
    if given and given in _alternatives(validation):
        return RawScore(100, "Correct! (alternative answer accepted)")
    return RawScore(0, "Incorrect. Review the solution for the correct answer.")


def _answer_text(value: Any) -> str:
    """Render an answer as comparable text (lists become comma-separated)."""
    if isinstance(value, list):
        return ",".join(str(item).strip() for item in value)
    if isinstance(value, ToleranceAnswer):
        return f"{value.value:g}"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return "" if value is None else str(value)


def raw_score(exercise: Exercise, answer: Any) -> RawScore:
    """
    Compute the type-specific score of an answer, before penalties.

    Args:
        exercise: Exercise being answered
        answer: Submitted answer (shape should match correctAnswer)

    Returns:
        RawScore with score in [0, 100] and feedback text
    """
    correct = exercise.solution.correct_answer
    validation = exercise.validation

    match exercise.type:
        case ExerciseType.MULTIPLE_CHOICE:
            return _score_multiple_choice(correct, answer)
        case ExerciseType.FILL_BLANK:
            return _score_fill_blank(correct, answer, validation)
        case ExerciseType.TRUE_FALSE:
            return _score_true_false(correct, answer)
        case ExerciseType.CALCULATION:
            return _score_calculation(correct, answer, validation)
        case ExerciseType.MATCHING:
            return _score_matching(correct, answer)
        case (
            ExerciseType.ORDERING
            | ExerciseType.SHORT_ANSWER
            | ExerciseType.LONG_ANSWER
            | ExerciseType.PROOF
            | ExerciseType.TRANSLATION
            | ExerciseType.CONJUGATION
            | ExerciseType.DIAGRAM
            | ExerciseType.CODING
            | ExerciseType.DERIVATION
        ):
            return _score_text(correct, answer, validation)
        case _:
            assert_never(exercise.type)


# ===========================================
# Public API
# ===========================================


def score_submission(
    exercise: Exercise,
    answer: Any,
    hints_used: int = 0,
    time_taken: float = 0,
) -> SubmissionResult:
    """
    Grade an answer.

    Args:
        exercise: Exercise being answered
        answer: Submitted answer
        hints_used: Number of hints revealed before answering
        time_taken: Seconds spent on the exercise

    Returns:
        SubmissionResult with clamped score, pass flag, points and feedback
    """
    validation = exercise.validation
    problem = exercise.problem

    result = raw_score(exercise, answer)
    score = result.score
    if result.partial and not validation.allow_partial_credit:
        score = 0

    score -= max(hints_used, 0) * validation.hint_penalty

    time_limit = problem.time_limit
    if validation.time_penalty and time_limit and time_taken > time_limit:
        score -= (time_taken - time_limit) * validation.time_penalty

    score = min(max(score, 0.0), 100.0)
    passed = score >= validation.passing_score
    points_earned = min(
        _round_half_up(score / 100 * problem.max_points), problem.max_points
    )
    final_score = _round_half_up(score)

    if passed:
        feedback = f"{result.feedback} You passed!"
    else:
        feedback = f"{result.feedback} You need {validation.passing_score}% to pass."

    return SubmissionResult(
        passed=passed,
        score=final_score,
        points_earned=points_earned,
        max_points=problem.max_points,
        feedback=feedback,
        show_solution=passed or final_score < SHOW_SOLUTION_BELOW,
    )
