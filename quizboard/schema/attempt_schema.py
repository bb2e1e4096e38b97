from typing import Optional, List, Dict
from datetime import datetime
from pydantic import BaseModel

class AttemptSubmission(BaseModel):
    answers: Dict[str, str]

class AttemptResult(BaseModel):
    score: int
    total_score: int
    percentage: int
    passed: bool

class AttemptOut(BaseModel):
    attempt_id: int
    quiz_id: int
    user_id: str
    answers: Optional[Dict[str, str]] = None
    score: int
    total_score: int
    percentage: int
    completed: bool
    started_at: datetime
    completed_at: Optional[datetime] = None
    time_taken: Optional[int] = None

    model_config = {
        "from_attributes": True
    }

class UserAttemptOut(BaseModel):
    attempt_id: int
    quiz_id: int
    quiz_title: str
    quiz_description: Optional[str] = None
    score: int
    total_score: int
    percentage: int
    completed_at: datetime
    time_taken: Optional[int] = None

class UserAttemptsOut(BaseModel):
    attempts: List[UserAttemptOut]

###############
### Ranking ###
###############
class RankingEntry(BaseModel):
    rank: int
    user_id: str
    name: str
    score: int
    total_score: int
    completed_at: datetime

class RankingsOut(BaseModel):
    quiz_id: int
    rankings: List[RankingEntry]
