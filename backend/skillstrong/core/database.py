"""Engine and session wiring. SQLite locally, Supabase Postgres in production."""

from sqlmodel import Session, SQLModel, create_engine

from skillstrong.core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # Pooled Postgres connections get dropped by the Supabase pooler when idle
    return {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 5}


engine = create_engine(settings.database_url, echo=settings.debug, **_engine_options(settings.database_url))


def init_db() -> None:
    import skillstrong.models  # noqa: F401 - register listings, profile and conversation tables
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
