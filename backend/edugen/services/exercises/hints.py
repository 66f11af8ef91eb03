"""
Hint Reveal

Hints are revealed as a prefix of the exercise's hint list, never out of
order. Each revealed hint costs ``validation.hintPenalty`` points when the
answer is graded.
"""

from edugen.models.exercise import Exercise, HintReveal


def reveal_hints(
    exercise: Exercise, index: int = 0, reveal_all: bool = False
) -> HintReveal:
    """
    Reveal hints up to and including ``index``.

    Args:
        exercise: Exercise whose hints are revealed
        index: Zero-based index of the last hint to reveal (negative → none)
        reveal_all: Reveal every hint regardless of index

    Returns:
        HintReveal with the revealed prefix and the penalty it carries
    """
    total = len(exercise.hints)
    revealed_count = total if reveal_all else min(max(index + 1, 0), total)
    revealed = list(exercise.hints[:revealed_count])

    return HintReveal(
        exercise_id=exercise.id,
        hints=revealed,
        has_more=revealed_count < total,
        total_hints=total,
        penalty=exercise.validation.hint_penalty * len(revealed),
    )
