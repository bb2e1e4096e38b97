from quizboard.model.users import User
from quizboard.model.quizzes import Quiz
from quizboard.model.questions import Question
from quizboard.model.attempts import Attempt

__all__ = ["User", "Quiz", "Question", "Attempt"]
