#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Set DATABASE_URL to point at a local PostgreSQL, or IS_TESTING=true to run
against the in-memory SQLite database.
"""
import logging
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

logger = logging.getLogger("run")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.getenv("PORT", "8000"))
    logger.info("Starting FitClub API on http://localhost:%d (docs at /docs)", port)
    uvicorn.run("fitclub.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
