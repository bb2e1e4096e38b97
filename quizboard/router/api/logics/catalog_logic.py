from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import desc, or_
from sqlalchemy.orm import Session, selectinload

from quizboard.database.db import transaction
from quizboard.directory import IsAdmin
from quizboard.exceptions import ForbiddenError, NotFoundError, QuizValidationError
from quizboard.log import get_logger
from quizboard.model.questions import Question, QUESTION_TYPES, MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER
from quizboard.model.quizzes import Quiz
from quizboard.schema.quiz_schema import QuestionCreate, QuizCreate
from quizboard.time_util import to_naive_utc, utcnow

log = get_logger(__name__)


def list_active_quizzes_logic(db: Session, now: Optional[datetime] = None) -> List[Quiz]:
    """Return the quizzes open right now, newest first."""
    now = now or utcnow()
    return (
        db.query(Quiz)
        .filter(
            Quiz.is_active.is_(True),
            or_(Quiz.scheduled_end.is_(None), Quiz.scheduled_end > now),
            or_(Quiz.scheduled_start.is_(None), Quiz.scheduled_start < now),
        )
        .order_by(desc(Quiz.created_at), desc(Quiz.quiz_id))
        .all()
    )


def get_quiz_logic(db: Session, quiz_id: int) -> Quiz:
    """Return the quiz with its questions loaded in order."""
    quiz = (
        db.query(Quiz)
        .options(selectinload(Quiz.questions))
        .filter(Quiz.quiz_id == quiz_id)
        .first()
    )
    if not quiz:
        raise NotFoundError("Quiz not found")
    return quiz


def _validate_question(index: int, question: QuestionCreate) -> List[Dict[str, str]]:
    field = f"questions[{index}]"
    errors = []
    if not question.content or not question.content.strip():
        errors.append({"field": f"{field}.content", "message": "Question text is required"})
    if question.points < 1:
        errors.append({"field": f"{field}.points", "message": "Points must be at least 1"})

    qtype = question.question_type
    if qtype not in QUESTION_TYPES:
        errors.append({
            "field": f"{field}.question_type",
            "message": f"Question type must be one of {', '.join(QUESTION_TYPES)}",
        })
    elif qtype == MULTIPLE_CHOICE:
        populated = [key for key, text in (question.options or {}).items() if text and text.strip()]
        if len(populated) < 2:
            errors.append({"field": f"{field}.options", "message": "At least two options are required"})
        if question.correct_answer not in populated:
            errors.append({
                "field": f"{field}.correct_answer",
                "message": "Correct answer must be one of the option keys",
            })
    elif qtype == TRUE_FALSE:
        if question.correct_answer not in ("true", "false"):
            errors.append({"field": f"{field}.correct_answer", "message": "Correct answer must be 'true' or 'false'"})
    elif qtype == SHORT_ANSWER:
        if not question.correct_answer:
            errors.append({"field": f"{field}.correct_answer", "message": "Correct answer is required"})
    return errors


def validate_quiz(payload: QuizCreate) -> None:
    """
    Checks a quiz definition field by field.

    Raises:
        QuizValidationError: Carrying every problem found, not just the first.
    """
    errors = []
    if not payload.title or not payload.title.strip():
        errors.append({"field": "title", "message": "Title is required"})
    if payload.duration is None:
        errors.append({"field": "duration", "message": "Duration is required"})
    elif payload.duration <= 0:
        errors.append({"field": "duration", "message": "Duration must be greater than 0"})
    start = to_naive_utc(payload.scheduled_start)
    end = to_naive_utc(payload.scheduled_end)
    if start is not None and end is not None and start >= end:
        errors.append({"field": "scheduled_end", "message": "Scheduled end must be after scheduled start"})
    if not 0 <= payload.passing_score <= 100:
        errors.append({"field": "passing_score", "message": "Passing score must be between 0 and 100"})
    if not payload.questions:
        errors.append({"field": "questions", "message": "A quiz needs at least one question"})
    for index, question in enumerate(payload.questions or []):
        errors.extend(_validate_question(index, question))
    if errors:
        raise QuizValidationError(errors)


def create_quiz_logic(db: Session, creator_id: str, payload: QuizCreate, is_admin: IsAdmin) -> Quiz:
    """
    Create a quiz and all of its questions in a single transaction.

    Raises:
        ForbiddenError: The creator is not an administrator.
        QuizValidationError: The definition is malformed.
    """
    if not is_admin(creator_id):
        raise ForbiddenError()
    validate_quiz(payload)

    quiz = Quiz(
        creator_id=creator_id,
        title=payload.title.strip(),
        description=payload.description,
        duration=payload.duration,
        scheduled_start=to_naive_utc(payload.scheduled_start),
        scheduled_end=to_naive_utc(payload.scheduled_end),
        is_active=True,
        total_questions=len(payload.questions),
        passing_score=payload.passing_score,
    )
    quiz.questions = [
        Question(
            position=position,
            content=q.content,
            question_type=q.question_type,
            options=q.options if q.question_type == MULTIPLE_CHOICE else None,
            correct_answer=q.correct_answer,
            points=q.points,
            explanation=q.explanation,
        )
        for position, q in enumerate(payload.questions)
    ]
    with transaction(db):
        db.add(quiz)
    db.refresh(quiz)
    log.info("Quiz %s created by %s with %d questions", quiz.quiz_id, creator_id, quiz.total_questions)
    return quiz


def set_quiz_active_logic(db: Session, quiz_id: int, user_id: str, active: bool, is_admin: IsAdmin) -> Quiz:
    """Open or close a quiz. Administrators only."""
    if not is_admin(user_id):
        raise ForbiddenError()
    quiz = get_quiz_logic(db, quiz_id)
    with transaction(db):
        quiz.is_active = active
    log.info("Quiz %s set active=%s by %s", quiz_id, active, user_id)
    return quiz
