#!/usr/bin/env python3
"""
Run Alembic migrations for the records table
"""
import sys
from pathlib import Path

from alembic.config import Config
from alembic import command

from agroguard.config import init_settings

# Configure Alembic
alembic_cfg = Config(str(Path(__file__).resolve().parent / "alembic.ini"))

settings = init_settings()
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    Path(settings.DATA_DIR).mkdir(parents=True, exist_ok=True)

try:
    print("Running Alembic migrations...")
    command.upgrade(alembic_cfg, "head")
    print("✅ Migrations completed successfully!")
except Exception as e:
    error_msg = str(e).lower()
    print(f"❌ Migration failed: {e}")

    if "permission denied" in error_msg or "insufficient privilege" in error_msg:
        print("\n⚠️  PERMISSION ERROR!")
        print("The database user does not have CREATE privileges on the target schema.")
        sys.exit(1)

    raise
