from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure import db

# Global engine (initialized at startup)
engine: AsyncEngine | None = None


def get_uow() -> db.SqlAlchemyUnitOfWork:
    """Request-scoped unit of work over the application engine."""
    if not engine:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return db.SqlAlchemyUnitOfWork(engine)
