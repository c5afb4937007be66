import importlib
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from pharma_sheet.config import Settings, get_settings
from pharma_sheet.database.base import Base


app_settings: Settings = get_settings()
logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30
_SQLITE_BUSY_TIMEOUT_MS = _SQLITE_BUSY_TIMEOUT_SECONDS * 1000


def _is_sqlite_memory(url):
    database = url.database
    if database in (None, "", ":memory:"):
        return True
    return url.query.get("mode") == "memory"


def build_engine(database_url):
    """Create an engine with the SQLite pragmas the schema relies on."""
    url = make_url(database_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    is_memory = is_sqlite and _is_sqlite_memory(url)

    connect_args = {}
    engine_kwargs: dict[str, object] = dict(pool_pre_ping=True)
    if is_sqlite:
        connect_args = {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
        if is_memory:
            engine_kwargs.update(poolclass=StaticPool)

    new_engine = create_engine(database_url, connect_args=connect_args, **engine_kwargs)

    if is_sqlite:
        # Foreign keys are off by default in SQLite; the sync relies on them.
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={_SQLITE_BUSY_TIMEOUT_MS}")
                if not is_memory:
                    cursor.execute("PRAGMA journal_mode=WAL")
            finally:
                cursor.close()

    return new_engine


engine = build_engine(app_settings.DATABASE_URL)


def import_all_models() -> None:
    for module_name in (
        "pharma_sheet.models.blister_date_history",
        "pharma_sheet.models.medicine",
        "pharma_sheet.models.medicine_brand",
        "pharma_sheet.models.medicine_house",
        "pharma_sheet.models.warehouse",
        "pharma_sheet.models.warehouse_sheet",
    ):
        importlib.import_module(module_name)


def init_db(bind=None) -> None:
    import_all_models()
    Base.metadata.create_all(bind=bind or engine)
    logger.debug("Database schema ensured")
