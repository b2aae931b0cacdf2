from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from tennis_connect.core.settings import settings

DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

# SQLite ignores foreign keys unless asked; profiles, sessions and messages
# rely on ON DELETE CASCADE / SET NULL.
if DATABASE_URL.startswith("sqlite"):

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Not to be confused with login sessions (tennis_connect.core.sessions).
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
