from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
import os
import uuid

# Postgres in production; the sqlite default keeps local runs dependency free.
SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./promojour.db")

engine = create_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

class Base(DeclarativeBase):
	pass


def new_id() -> str:
	"""Primary keys are string UUIDs, matching the Postgres schema."""
	return str(uuid.uuid4())
