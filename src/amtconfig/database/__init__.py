from .base import Base
from .gateway import Database, QueryResult, create_database

__all__ = ["Base", "Database", "QueryResult", "create_database"]
