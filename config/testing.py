from ._common import *  # noqa: F401,F403

DEBUG = False
TESTING = True

STORE_BACKEND = "memory"
REFERENCE_DATE = "2024-03-15"

AUTO_INIT_DB = False
