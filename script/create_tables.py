# create_tables.py
from sqlalchemy import inspect

from quizboard import model  # noqa: F401
from quizboard.database.base_class import Base
from quizboard.database.db import ENGINE
from quizboard.log import get_logger

log = get_logger("script.create_tables")

Base.metadata.create_all(bind=ENGINE)
log.info("Tables created.")

inspector = inspect(ENGINE)
log.info("Existing tables: %s", inspector.get_table_names())
