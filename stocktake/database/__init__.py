from stocktake.database.base import Base
from stocktake.database.engine import create_db_engine, init_db
from stocktake.database.session import commit_or_raise, create_session_factory, get_db

__all__ = ["Base", "commit_or_raise", "create_db_engine", "create_session_factory", "get_db", "init_db"]
