# design_poker/test_scripts/init_db.py

"""
Initialize database schema by creating all tables defined by SQLAlchemy models.
Production databases should be migrated with Alembic instead.
"""

from app.db.base import Base
from app.db.session import engine

# Import models here so SQLAlchemy registers them
import app.db.models  # noqa: F401

def main() -> None:
    print("Creating all tables using SQLAlchemy metadata...")
    Base.metadata.create_all(bind=engine)
    print("Done.")

if __name__ == "__main__":
    main()
