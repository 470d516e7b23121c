"""
Initialize the Showcase CMS database.

Creates tables, applies column migrations and seeds the hero and default
admin user for the backend selected by DB_BACKEND. Safe to re-run.

Run from project root: python scripts/init_db.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.db import DB_BACKEND, initialize_database


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    print(f"Initializing database (backend={DB_BACKEND})...")
    initialize_database()
    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
