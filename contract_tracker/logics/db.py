from typing import Dict, Optional, Any

from sqlalchemy import Column, DateTime, Text, Index, func
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine, Field
from datetime import datetime
from collections import OrderedDict
import pandas as pd

import logging

logger = logging.getLogger(__name__)


class ActivityLogModel(SQLModel, table=True):
    """One edit outcome or batch job run against the tracker workbook."""
    __tablename__ = "activity_log"

    id: int | None = Field(default=None, primary_key=True)

    activity_id: str = Field(max_length=36, unique=True)
    ActivityType: str = Field(max_length=50)
    SheetName: Optional[str] = Field(default=None, max_length=100)
    RowNumber: Optional[int] = None
    Status: str = Field(max_length=30)
    User: str = Field(max_length=100)
    RecordsAffected: int = 0
    SummaryData: Optional[str] = Field(default=None, sa_column=Column(Text))
    CreatedDateTime: datetime = Field(
        sa_column=Column(DateTime, nullable=False, default=datetime.now, server_default=func.now())
    )

    __table_args__ = (
        Index('idx_activity_type_time', 'ActivityType', 'CreatedDateTime'),
        Index('idx_activity_user_time', 'User', 'CreatedDateTime'),
    )


class DBManager:
    def __init__(self, database_url: str, Model, limit: int, skip: int):
        """
        Initialize the DBManager with a database URL.

        Args:
            database_url (str): The database connection string.
        """
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, connect_args=connect_args)
        SQLModel.metadata.create_all(bind=self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.Model = Model
        self.skip = skip
        self.limit = limit

    def _execute_query(self, query) -> Dict[str, Any]:
        total = query.count()
        query = query.order_by(self.Model.id.desc())
        records = query.offset(self.skip).limit(self.limit).all()
        records = [
            OrderedDict((column.name, getattr(row, column.name)) for column in row.__table__.columns)
            for row in records
        ]
        return {"total": total, "records": records}

    def save_to_db(self, df: pd.DataFrame) -> int:
        """
        Insert DataFrame rows as model instances.
        Rolls back on failure and logs exception.
        """
        session = self.SessionLocal()

        try:
            records = df.to_dict(orient="records")
            instances = [self.Model(**row) for row in records]
            session.add_all(instances)
            session.commit()
            logger.info(f"[DBManager] Inserted {len(instances)} new records.")
            return len(instances)

        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"[DBManager] Error during save_to_db. Rolled back. Error: {e}")
            raise Exception(f"Error saving to database: {str(e)}") from e

        finally:
            session.close()
            logger.debug("[DBManager] Session closed.")

    def read_db(self, filters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Newest-first records, optionally filtered by exact column values."""
        with self.SessionLocal() as session:
            query = session.query(self.Model)
            for column, value in (filters or {}).items():
                if value is not None:
                    query = query.filter(getattr(self.Model, column) == value)
            return self._execute_query(query)
