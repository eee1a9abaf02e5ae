from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from tableside.core.config import settings
import logging
import threading
import contextvars

DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy connect_args and pool options differ between SQLite and server DBs
connect_args = {}
engine_kwargs = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
else:
    # pool_pre_ping avoids "server has gone away" errors on stale pooled connections
    engine_kwargs = {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }

engine = create_engine(DATABASE_URL, connect_args=connect_args, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# --- Pool monitoring: log connects and checkouts every N events ---
_pool_logger = logging.getLogger("tableside.db.pool")
_connect_count = 0
_checkout_count = 0
_pool_lock = threading.Lock()

# The request middleware sets a fresh one-element list per request; a mutable
# holder survives the context copies made for the endpoint task and threadpool.
request_db_query_count = contextvars.ContextVar("request_db_query_count", default=None)
_global_db_query_count = 0


@event.listens_for(engine, "connect")
def _on_connect(dbapi_connection, connection_record):
    global _connect_count
    with _pool_lock:
        _connect_count += 1
        cnt = _connect_count
    if cnt % settings.DB_LOG_EVERY_N == 0:
        _pool_logger.info("SQLAlchemy pool CONNECT events: total opened=%s", cnt)
    if DATABASE_URL.startswith("sqlite"):
        # SQLite leaves foreign keys off unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(engine, "checkout")
def _on_checkout(dbapi_connection, connection_record, connection_proxy):
    global _checkout_count
    with _pool_lock:
        _checkout_count += 1
        cnt = _checkout_count
    if cnt % settings.DB_LOG_EVERY_N == 0:
        _pool_logger.info("SQLAlchemy pool CHECKOUT events: total checkouts=%s", cnt)


@event.listens_for(engine, "before_cursor_execute")
def _on_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    counter = request_db_query_count.get()
    if counter is not None:
        counter[0] += 1
    global _global_db_query_count
    with _pool_lock:
        _global_db_query_count += 1


def get_global_db_queries_total() -> int:
    """Return the total number of DB roundtrips since process start."""
    return _global_db_query_count


def get_db():
    """FastAPI dependency that provides a request-scoped SQLAlchemy Session.

    The session is always closed after the request so its connection goes
    back to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _import_models():
    # Import models here so they are registered on the metadata
    import tableside.models.category  # noqa: F401
    import tableside.models.menu_item  # noqa: F401
    import tableside.models.order  # noqa: F401
    import tableside.models.order_item  # noqa: F401
    import tableside.models.user  # noqa: F401
    import tableside.models.admin_session  # noqa: F401


def create_db():
    _import_models()
    Base.metadata.create_all(bind=engine)


def drop_db():
    _import_models()
    Base.metadata.drop_all(bind=engine)
