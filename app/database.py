from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def build_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    db_engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)

    if db_engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless enabled per connection
        @event.listens_for(db_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


engine = build_engine(settings.DATABASE_URL)
sessionlocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = sessionlocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None, drop: bool = False):
    """Create every table registered on ``Base`` (optionally dropping first)."""
    # Imported for their side effect of registering tables on Base.metadata
    from app.models import user, app, folder  # noqa: F401

    bind = bind or engine
    if drop:
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
