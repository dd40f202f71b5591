#!/usr/bin/env python
"""Run the database cleanup from a source checkout.

Usage:
    python backend/scripts/cleanup_database.py [--dry-run] [--stats]

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
"""

import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from retention.cli import main


if __name__ == "__main__":
    sys.exit(main())
