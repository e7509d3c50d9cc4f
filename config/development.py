import os

from ._common import *  # noqa: F401,F403

DEBUG = True

# If enabled (mysql backend), app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
