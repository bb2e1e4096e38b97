from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from quizboard import model  # noqa: F401  registers every table on Base.metadata
from quizboard.config import settings
from quizboard.exceptions import QuizError
from quizboard.log import get_logger
from quizboard.router import (
    quizzes_router,
    users_router,
)

log = get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.API_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:8081",  # Expo web
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quizzes_router, prefix="/quizzes", tags=["Quizzes"])
app.include_router(users_router, prefix="/users", tags=["User"])


@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    log.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "error": "internal"},
    )


#####################
### Root Endpoint ###
#####################
@app.get("/")
def read_root():
    return {"service": settings.PROJECT_NAME, "environment": settings.ENV, "version": settings.API_VERSION}
