"""
Centralized constants for the QueryBench backend.

Every value reads from an environment variable with a default, so a local
checkout runs without any configuration.
"""
import os

# --- API Version ---
API_VERSION = os.getenv("QUERYBENCH_API_VERSION", "1.0.0")

# --- Persistence ---
DATA_DIR = os.getenv("QUERYBENCH_DATA_DIR", os.path.join("data", "querybench"))
HISTORY_STORAGE_KEY = os.getenv("QUERYBENCH_HISTORY_KEY", "sqlQueryHistory")
SAVED_QUERIES_STORAGE_KEY = os.getenv("QUERYBENCH_SAVED_QUERIES_KEY", "savedQueriesV2")

# --- History ---
HISTORY_LIMIT = int(os.getenv("QUERYBENCH_HISTORY_LIMIT", "50"))
HISTORY_PREVIEW_LENGTH = int(os.getenv("QUERYBENCH_HISTORY_PREVIEW_LENGTH", "100"))

# --- Simulated execution latency (milliseconds) ---
QUERY_LATENCY_MIN_MS = int(os.getenv("QUERYBENCH_LATENCY_MIN_MS", "1000"))
QUERY_LATENCY_MAX_MS = int(os.getenv("QUERYBENCH_LATENCY_MAX_MS", "2000"))

# --- Paging ---
PAGE_SIZES = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = int(os.getenv("QUERYBENCH_DEFAULT_PAGE_SIZE", "10"))

# --- Editor ---
DEFAULT_QUERY = os.getenv("QUERYBENCH_DEFAULT_QUERY", "SELECT * FROM users LIMIT 10;")
DEFAULT_SAVED_CATEGORY = "general"

# --- Environment descriptor ---
ENVIRONMENT_ID = os.getenv("QUERYBENCH_ENVIRONMENT_ID", "dev")
ENVIRONMENT_NAME = os.getenv("QUERYBENCH_ENVIRONMENT_NAME", "Development")
ENVIRONMENT_TYPE = os.getenv("QUERYBENCH_ENVIRONMENT_TYPE", "development")
ENVIRONMENT_CONNECTION = os.getenv("QUERYBENCH_ENVIRONMENT_CONNECTION", "dev-db.company.com:5432")
ENVIRONMENT_CONNECTED = os.getenv("QUERYBENCH_ENVIRONMENT_CONNECTED", "true").lower() in ("1", "true", "yes")

# --- CORS ---
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
