from quizboard.database.db import get_db, SessionLocal, ENGINE

__all__ = ["get_db", "SessionLocal", "ENGINE"]
