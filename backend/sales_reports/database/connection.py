from typing import Any, Dict, List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
import logging

from sales_reports.config import settings
from sales_reports.utils.exceptions import ExecutorError

logger = logging.getLogger(__name__)

class DatabaseManager:
    """
    Manage the connection pool to the sales database.

    ``execute_raw_query`` is the query executor used by the report service:
    it takes text with ``$n`` placeholders plus the positional parameters
    and returns rows as ordered dicts. asyncpg binds a Python list to a
    single array placeholder, which the ``= ANY($n)`` predicates rely on.
    """

    _engine: Optional[AsyncEngine] = None

    @classmethod
    async def initialize(cls):
        """Initialize database connection"""
        if cls._engine is None:
            url = settings.async_database_url
            if not url:
                raise ExecutorError(
                    "Database is not configured",
                    code="DATABASE_NOT_CONFIGURED",
                    details={"setting": "DATABASE_URL"},
                )

            try:
                cls._engine = create_async_engine(
                    url,
                    echo=False,
                    pool_pre_ping=True,
                    pool_size=settings.DB_POOL_SIZE,
                    max_overflow=settings.DB_MAX_OVERFLOW,
                    connect_args={"command_timeout": settings.QUERY_TIMEOUT_SECONDS},
                )
                logger.info("Database connection initialized successfully")

            except Exception as e:
                logger.error(f"Failed to initialize database: {str(e)}")
                raise ExecutorError(f"Failed to initialize database: {str(e)}") from e

    @classmethod
    async def close(cls):
        """Close database connection"""
        if cls._engine:
            await cls._engine.dispose()
            cls._engine = None
            logger.info("Database connection closed")

    @classmethod
    async def execute_raw_query(cls, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Execute a read-only query with positional ``$n`` parameters"""
        if cls._engine is None:
            await cls.initialize()

        try:
            async with cls._engine.connect() as conn:
                result = await conn.exec_driver_sql(query, tuple(params))
                return [dict(row._mapping) for row in result]
        except SQLAlchemyError as e:
            raise ExecutorError(
                f"Query execution failed: {str(e.__cause__ or e)}",
                code="QUERY_FAILED",
            ) from e
        except OSError as e:
            raise ExecutorError(
                f"Database unreachable: {str(e)}",
                code="DATABASE_UNREACHABLE",
            ) from e

    @classmethod
    async def ping(cls) -> bool:
        """Check that the database answers a trivial query"""
        rows = await cls.execute_raw_query("SELECT 1 AS ok")
        return bool(rows and rows[0].get("ok") == 1)
