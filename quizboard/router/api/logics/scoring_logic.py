"""
Scoring of submitted answers.

Everything here is pure: no database access, no clock, no logging. The same
questions and answers always produce the same result.
"""
from typing import Iterable, Mapping, NamedTuple, Optional


class ScoreResult(NamedTuple):
    score: int
    total_score: int


def is_correct(question, submitted: Optional[str]) -> bool:
    """
    Exact, case-sensitive comparison of a submitted value with the question's answer.

    Multiple choice compares option keys, true/false compares the literal
    "true"/"false", short answer compares the text as typed.
    """
    if submitted is None:
        return False
    return submitted == question.correct_answer


def score_answers(questions: Iterable, answers: Mapping[str, str]) -> ScoreResult:
    """
    Scores an answer map against a quiz's questions.

    Parameters:
        questions: Objects exposing `question_id`, `correct_answer` and `points`.
        answers: Submitted values keyed by question id (as a string).

    Returns:
        ScoreResult: Points earned and points available. Unanswered questions
        earn nothing but still count toward the total.
    """
    score = 0
    total_score = 0
    for question in questions:
        points = question.points or 1
        total_score += points
        if is_correct(question, answers.get(str(question.question_id))):
            score += points
    return ScoreResult(score=score, total_score=total_score)


def percentage(score: int, total_score: int) -> int:
    """Whole-number percentage, rounding halves up."""
    if total_score <= 0:
        return 0
    return (200 * score + total_score) // (2 * total_score)
