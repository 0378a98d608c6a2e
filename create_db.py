# create_db.py - Create the game database tables
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_dir))

from sqlalchemy import inspect

from dreamers.core.config import get_settings
from dreamers.db import Base, make_engine
from dreamers import models  # noqa: F401  (registers every table)

settings = get_settings()
engine = make_engine(settings.DATABASE_URL)

print(f"Creating database tables in {settings.DATABASE_URL} ...")
Base.metadata.create_all(bind=engine)
print("Database tables created.")

tables = inspect(engine).get_table_names()
print(f"\n{len(tables)} tables:")
for table in tables:
    print(f"   - {table}")
