"""SQL-backed key/value store over SQLAlchemy Core.

One table, ``kv_store(key, value)``, with JSON-encoded values. The
connection string's scheme selects the dialect:

- ``mysql:``  -> ``mysql+pymysql:`` (remainder kept verbatim)
- ``websql:``, ``cordova-sqlite:``, ``sqlite:`` -> a SQLite file named by the
  remainder (leading ``//`` stripped); empty or ``:memory:`` is in-memory.

SQLAlchemy Core (not ORM) is used: a key/value table has no object graph
worth mapping.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Self

from sqlalchemy import (
    Column,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    event,
    insert,
    select,
)
from sqlalchemy.engine import Engine

from kvresolver.errors import ConfigurationError

logger = logging.getLogger(__name__)

SQLITE_SCHEMES = frozenset({"websql", "cordova-sqlite", "sqlite"})
MYSQL_SCHEMES = frozenset({"mysql"})

metadata = MetaData()

kv_store = Table(
    "kv_store",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("value", Text, nullable=False),
)


def to_sqlalchemy_url(url: str) -> str:
    """Translate a resolver connection string into a SQLAlchemy URL."""
    scheme, sep, rest = url.partition(":")
    if not sep:
        msg = "Invalid URL"
        raise ConfigurationError(msg)
    if scheme in MYSQL_SCHEMES:
        return f"mysql+pymysql:{rest}"
    if scheme in SQLITE_SCHEMES:
        name = rest[2:] if rest.startswith("//") else rest
        if not name or name == ":memory:":
            return "sqlite://"
        return f"sqlite:///{name}"
    msg = f"AnySQL store does not handle scheme {scheme!r}"
    raise ConfigurationError(msg)


def create_store_engine(url: str) -> Engine:
    """Create the engine for *url*; file-backed SQLite runs in WAL mode."""
    sa_url = to_sqlalchemy_url(url)
    engine = create_engine(sa_url, echo=False)

    if sa_url.startswith("sqlite:///"):

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


class AnySQLStore:
    """Key/value store on any SQLAlchemy-supported SQL database.

    Constructing the store does not connect; the table is created on the
    first operation. The caller owns the store and must :meth:`close` it.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.scheme = url.partition(":")[0]
        self._engine: Engine | None = create_store_engine(url)
        self._ready = False

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            msg = "Store is closed"
            raise RuntimeError(msg)
        return self._engine

    def _ensure_table(self) -> Engine:
        engine = self.engine
        if not self._ready:
            metadata.create_all(engine)
            self._ready = True
        return engine

    def get(self, key: str, default: Any = None) -> Any:
        engine = self._ensure_table()
        with engine.connect() as conn:
            row = conn.execute(select(kv_store.c.value).where(kv_store.c.key == key)).first()
        if row is None:
            return default
        return json.loads(row.value)

    def put(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any existing value.

        Delete-then-insert in one transaction. Not safe against concurrent
        writers of the same key: on MySQL two racing puts can both delete,
        and the second insert then fails with ``IntegrityError``.
        """
        encoded = json.dumps(value)
        engine = self._ensure_table()
        with engine.begin() as conn:
            conn.execute(delete(kv_store).where(kv_store.c.key == key))
            conn.execute(insert(kv_store).values(key=key, value=encoded))

    def delete(self, key: str) -> bool:
        """Remove *key*; return whether it existed."""
        engine = self._ensure_table()
        with engine.begin() as conn:
            result = conn.execute(delete(kv_store).where(kv_store.c.key == key))
        return result.rowcount > 0

    def keys(self) -> list[str]:
        engine = self._ensure_table()
        with engine.connect() as conn:
            rows = conn.execute(select(kv_store.c.key).order_by(kv_store.c.key)).all()
        return [row.key for row in rows]

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug("Closed %s store", self.scheme, extra={"scheme": self.scheme})

    @property
    def closed(self) -> bool:
        return self._engine is None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AnySQLStore(scheme={self.scheme!r})"
