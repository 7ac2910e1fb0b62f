"""Initialize SQLite database for local development."""

from repcounter.database import sync_engine
from repcounter.models import Base, CounterPreferencesRecord, WorkoutSet  # noqa: F401


def init_db():
    """Create all tables in the database."""
    Base.metadata.create_all(bind=sync_engine)
    print("Database tables created successfully!")


if __name__ == "__main__":
    init_db()
