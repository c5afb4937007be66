from pharma_sheet.database.base import Base
from pharma_sheet.database.engine import build_engine, engine, init_db
from pharma_sheet.database.session import SessionLocal, get_db

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "init_db"]
