from quizboard.router.api.quizzes import router as quizzes_router
from quizboard.router.api.users import router as users_router
__all__ = [
    "quizzes_router",
    "users_router",
]
