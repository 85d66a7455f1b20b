from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import AUTH_DATABASE_URL, LAB_DATABASE_URL

# Users live in the auth database, lab entities in the lab database
AuthBase = declarative_base()
Base = declarative_base()

POOL_SIZE = 2
MAX_OVERFLOW = 2


def build_engine(url: str):
    if make_url(url).get_backend_name() == "sqlite":
        # local runs without postgres
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=30       # wait time before failing
    )


auth_engine = build_engine(AUTH_DATABASE_URL)
AuthSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=auth_engine)

lab_engine = build_engine(LAB_DATABASE_URL)
LabSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=lab_engine)


def _session_dependency(session_factory):
    def get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()
    return get_db


# Dependencies
get_auth_db = _session_dependency(AuthSessionLocal)
get_lab_db = _session_dependency(LabSessionLocal)
