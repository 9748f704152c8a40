# migration_script.py
"""
Database setup script: creates the tables, seeds the default resources and
purges expired sessions.
Usage: python migration_script.py
"""

import os
import sys

from sqlalchemy import inspect

# Make the project root importable when run as a script
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from hopebot.db.session import DATABASE_URL, SessionLocal, engine
from hopebot.db.base import Base

# Import every model so create_all sees the full schema
from hopebot.models.user import User
from hopebot.models.message import Message
from hopebot.models.resource import Resource
from hopebot.models.session import UserSession

from hopebot.core.security import purge_expired_sessions
from hopebot.services.resources import seed_default_resources

EXPECTED_TABLES = ("users", "messages", "resources", "sessions")


def run_migration() -> bool:
    print(f"🔄 Migrating database: {DATABASE_URL[:50]}")

    Base.metadata.create_all(bind=engine)
    print("✅ Tables created")

    db = SessionLocal()
    try:
        created = seed_default_resources(db)
        if created:
            print(f"  ✅ Added {created} default resources")
        else:
            print("  ⚠️  Resources already present, skipping seed")

        removed = purge_expired_sessions(db)
        print(f"  🧹 Removed {removed} expired sessions")

        print("🔍 Verifying tables...")
        existing = set(inspect(engine).get_table_names())
        missing = [t for t in EXPECTED_TABLES if t not in existing]
        for table in EXPECTED_TABLES:
            mark = "✅" if table in existing else "❌"
            print(f"  {mark} {table}")

        print(f"📊 users={db.query(User).count()} messages={db.query(Message).count()} "
              f"resources={db.query(Resource).count()} sessions={db.query(UserSession).count()}")
        return not missing
    except Exception as e:
        db.rollback()
        print(f"❌ Migration failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    ok = run_migration()
    sys.exit(0 if ok else 1)
