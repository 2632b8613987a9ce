from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
import sqlalchemy.pool
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import assessor.lib.json as json

from ..config.secrets import PostgresqlSecrets
from ..config.storage import PersistentSettings, StorageSettings
from ..di import NotReady
from ..provider import LoggingProvider


def provide_dsn(config: PersistentSettings, secrets: PostgresqlSecrets) -> DSN:
    if config.sqlite is not None:
        return DSN.create(config.sqlite.driver, database=config.sqlite.database)

    assert config.postgresql is not None
    return DSN.create(
        config.postgresql.driver,
        port=config.postgresql.port,
        host=str(config.postgresql.host) if config.postgresql.host else None,
        username=secrets.username.get_secret_value() if secrets.username else None,
        password=secrets.password.get_secret_value() if secrets.password else None,
        database=config.postgresql.database,
    )


def provide_alembic_conf(migration_path: Path, dsn: DSN, root: Path | NotReady) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(config: PersistentSettings, dsn: DSN, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    kwargs: dict[str, t.Any] = {}
    if config.sqlite is not None and config.sqlite.in_memory:
        # every connection must see the same in-memory database
        kwargs.update(poolclass=sqlalchemy.pool.StaticPool, connect_args={"check_same_thread": False})

    engine = sqlalchemy.create_engine(dsn, json_serializer=json.dumps, json_deserializer=json.loads, **kwargs)
    if config.sqlite is not None:
        sqlalchemy.event.listen(engine, "connect", disable_pysqlite_transactions)
        sqlalchemy.event.listen(engine, "begin", begin_sqlite_transaction)
    else:
        sqlalchemy.event.listen(engine, "connect", register_timezone)

    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": dsn.drivername,
            "database": dsn.database,
            "host": dsn.host,
            "port": dsn.port,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it (via di.Manage)."""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    settings: Provider[PersistentSettings] = Singleton(PersistentSettings.model_validate, config)
    postgresql_secrets: Provider[PostgresqlSecrets] = Singleton(PostgresqlSecrets.model_validate, secrets.postgresql)
    dsn: Provider[DSN] = Singleton(provide_dsn, config=settings, secrets=postgresql_secrets)
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf,
        migration_path=Path("migrations/"),
        dsn=dsn,
        root=root,
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(
        provide_engine,
        config=settings,
        dsn=dsn,
        logging=logging,
    )
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config: Provider[StorageSettings] = Configuration(strict=True)
    secrets: Provider[StorageSettings] = Configuration(strict=True)
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, logging=logging, root=root
    )


def register_timezone(dbapi_conn: t.Any, _: t.Any) -> None:
    """Set connection timezone to UTC for consistent datetime handling.

    PostgreSQL TIMESTAMP WITH TIME ZONE stores timestamps in UTC but returns
    them converted to the connection's timezone.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()


def disable_pysqlite_transactions(dbapi_conn: t.Any, _: t.Any) -> None:
    """Stop pysqlite from issuing its own BEGIN, so that SAVEPOINT works."""
    dbapi_conn.isolation_level = None


def begin_sqlite_transaction(conn: sqlalchemy.Connection) -> None:
    conn.exec_driver_sql("BEGIN")
