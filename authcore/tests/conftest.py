from __future__ import annotations

import os
import tempfile

# Settings, the engine and the rate-limit decorators are built at import time,
# so the environment has to be pinned before anything under authcore loads.
_TMP_DIR = tempfile.mkdtemp(prefix="authcore-tests-")

os.environ["APP_ENV"] = "testing"
os.environ["JWT_SECRET"] = "test-signing-secret-0123456789abcdef0123456789"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'authcore.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["HASHER_TIME_COST"] = "1"
os.environ["HASHER_MEMORY_COST"] = "8"
os.environ["HASHER_PARALLELISM"] = "1"
os.environ["HASHER_WORKERS"] = "2"
os.environ["HASHER_QUEUE_TIMEOUT"] = "1"
