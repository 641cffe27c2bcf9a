"""SQLAlchemy table definitions for persisted generations."""

from sqlalchemy import JSON, BigInteger, Column, Integer, LargeBinary, Text
from sqlalchemy.orm import declarative_base

from polygon_workspace.common.constants import GENERATIONS_TABLE

Base = declarative_base()


class GenerationRow(Base):
    """One saved generation. ``attachment`` is opaque to the store."""

    __tablename__ = GENERATIONS_TABLE
    # AUTOINCREMENT keeps SQLite from handing out ids of deleted rows again.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_ref = Column(Text, nullable=False, index=True)
    job_code = Column(Text, nullable=False, index=True)
    mean = Column(JSON, nullable=False)
    points = Column(JSON, nullable=False)
    editable_code = Column(Text, nullable=False)
    timestamp = Column(BigInteger, nullable=False, index=True)
    attachment = Column(LargeBinary, nullable=True)
