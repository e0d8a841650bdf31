"""
Test-wide setup.

The default app in regdesk.main is built at import time from the
environment, so the environment is pinned here before anything from regdesk
is imported.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["EMAIL_BACKEND"] = "log"
os.environ["PYTHON_ENV"] = "test"
