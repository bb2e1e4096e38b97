from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel

################
### Question ###
################
class QuestionCreate(BaseModel):
    content: Optional[str] = None
    question_type: str = "multiple_choice"
    options: Optional[Dict[str, str]] = None
    correct_answer: Optional[str] = None
    points: int = 1
    explanation: Optional[str] = None

class QuestionOut(BaseModel):
    question_id: int
    position: int
    content: str
    question_type: str
    options: Optional[Dict[str, str]] = None
    points: int

    model_config = {
        "from_attributes": True
    }

class QuestionAdminOut(QuestionOut):
    correct_answer: str
    explanation: Optional[str] = None

############
### Quiz ###
############
class QuizCreate(BaseModel):
    # presence of title, duration and questions is checked by validate_quiz
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    passing_score: int = 70
    questions: Optional[List[QuestionCreate]] = None

class QuizActiveUpdate(BaseModel):
    is_active: bool

class QuizOut(BaseModel):
    quiz_id: int
    creator_id: str
    title: str
    description: Optional[str] = None
    duration: int
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    is_active: bool
    total_questions: int
    passing_score: int
    created_at: datetime

    model_config = {
        "from_attributes": True
    }

class QuizDetailOut(QuizOut):
    questions: List[QuestionOut]

class QuizAdminOut(QuizOut):
    questions: List[QuestionAdminOut]

class QuizzesOut(BaseModel):
    quizzes: List[QuizOut]
