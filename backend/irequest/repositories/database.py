"""Database Client - Engine, session and query execution

Every statement goes through `query` (single statement, bounded retry on
transient connection failures) or `transaction` (several statements,
all-or-nothing, no retry).
"""
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import DBAPIError, DisconnectionError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from ..config.settings import settings
from ..utils.logger import get_logger
from .tables import Base

logger = get_logger(__name__)

# Global engine instance
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None

# Message fragments of driver errors worth retrying
TRANSIENT_MARKERS = (
    "timeout",
    "timed out",
    "connection reset",
    "econnreset",
    "enotfound",
    "could not translate host name",
    "name or service not known",
    "server closed the connection",
)


@dataclass
class QueryResult:
    """Materialized result of one executed statement"""
    rows: List[Any] = field(default_factory=list)
    rowcount: int = 0

    def scalars(self) -> List[Any]:
        """First column of every row (entities for `select(Model)`)"""
        return [row[0] for row in self.rows]

    def scalar(self) -> Any:
        """First column of the first row, or None"""
        return self.rows[0][0] if self.rows else None

    def first(self) -> Any:
        """First row, or None"""
        return self.rows[0] if self.rows else None

    def mappings(self) -> List[Dict[str, Any]]:
        """Rows as plain dicts keyed by column label"""
        return [dict(row._mapping) for row in self.rows]


def _build_engine(database_url: str, **overrides: Any) -> Engine:
    """Create an engine with the configured pool and timeouts"""
    if database_url.startswith("sqlite"):
        connect_args: Dict[str, Any] = {"check_same_thread": False, "timeout": 30}
        options: Dict[str, Any] = {}
    else:
        connect_args = {
            "connect_timeout": settings.db_connect_timeout,
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        }
        options = {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_recycle": settings.db_pool_recycle,
        }
    options.update(overrides)
    return create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        future=True,
        **options,
    )


def get_engine() -> Engine:
    """Get or create the database engine"""
    global _engine, _session_factory
    if _engine is None:
        logger.info("Connecting to database", extra={"action": "db_connect"})
        _engine = _build_engine(settings.database_url)
        _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


def configure_engine(database_url: str, **overrides: Any) -> Engine:
    """
    Replace the global engine (used by scripts and tests).

    Disposes any previous engine and clears the cached status ids,
    since they belong to the old database.
    """
    global _engine, _session_factory
    close_connection()
    _engine = _build_engine(database_url, **overrides)
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)

    from .status_registry import reset_status_registry
    reset_status_registry()
    return _engine


def get_session() -> Session:
    """Open a new ORM session bound to the global engine"""
    get_engine()
    return _session_factory()


def close_connection() -> None:
    """Dispose the engine and its pool"""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connection closed")


def create_tables() -> None:
    """Create all tables that do not exist yet"""
    Base.metadata.create_all(get_engine())
    logger.info("Database tables ensured")


def is_transient_error(exc: BaseException) -> bool:
    """True for connection-level failures that a retry may fix"""
    if isinstance(exc, (PoolTimeoutError, DisconnectionError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def _collect(result: Any) -> QueryResult:
    """Fetch everything while the session is still open"""
    # ORM selects come back as iterator results; only DML results lack rows
    if isinstance(result, CursorResult) and not result.returns_rows:
        return QueryResult(rows=[], rowcount=result.rowcount)
    rows = list(result.all())
    return QueryResult(rows=rows, rowcount=len(rows))


def query(
    statement: Any,
    params: Optional[Dict[str, Any]] = None,
    retries: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> QueryResult:
    """
    Execute one parameterized statement in its own transaction.

    Transient failures are retried up to `retries` attempts in total with a
    linearly growing pause (backoff * attempt). Anything else, or the last
    transient failure, propagates to the caller.

    Args:
        statement: SQLAlchemy executable (select/insert/update/delete/text)
        params: Bind parameters for `text()` statements
        retries: Total attempts (defaults to settings.db_query_retries)
        sleep: Pause function, replaceable in tests

    Returns:
        QueryResult with rows and rowcount
    """
    attempts = max(1, retries if retries is not None else settings.db_query_retries)
    attempt = 1

    while True:
        try:
            with get_session() as session:
                with session.begin():
                    result = session.execute(statement, params or {})
                    return _collect(result)
        except SQLAlchemyError as e:
            if attempt >= attempts or not is_transient_error(e):
                logger.error(f"Database query failed: {e}", extra={"action": "db_query"})
                raise
            delay = settings.db_retry_backoff_seconds * attempt
            logger.warning(
                f"Transient database error, retrying in {delay:.1f}s "
                f"(attempt {attempt}/{attempts}): {e}",
                extra={"action": "db_retry"}
            )
            sleep(delay)
            attempt += 1


def transaction(statements: Sequence[Any]) -> List[QueryResult]:
    """
    Execute several statements atomically.

    Either every statement commits or none does; the underlying error
    is re-raised after rollback. Not retried.
    """
    results: List[QueryResult] = []
    try:
        with get_session() as session:
            with session.begin():
                for statement in statements:
                    results.append(_collect(session.execute(statement)))
    except SQLAlchemyError as e:
        logger.error(f"Transaction rolled back: {e}", extra={"action": "db_transaction"})
        raise
    return results


def health_check() -> Dict[str, Any]:
    """Check database health"""
    try:
        query(text("SELECT 1"), retries=1)
        return {
            "status": "healthy",
            "dialect": get_engine().dialect.name,
            "connection": "ok"
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e)
        }
