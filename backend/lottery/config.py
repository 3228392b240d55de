import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "local")

# Admin access
# In prod/stage, ADMIN_PASSWORD must be set via env. For test/local, a fallback is allowed only if bypass is enabled.
ALLOW_INSECURE_ADMIN_BYPASS = os.getenv("ALLOW_INSECURE_ADMIN_BYPASS", "true").lower() == "true" if APP_ENV in {"test", "local"} else False
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
if ADMIN_PASSWORD is None:
	if ALLOW_INSECURE_ADMIN_BYPASS:
		ADMIN_PASSWORD = "admin1234"
	else:
		raise RuntimeError("ADMIN_PASSWORD is required")

# PID ring is [0, MAX_PID]
MAX_PID = int(os.getenv("MAX_PID", "1000"))
if MAX_PID < 0:
	raise RuntimeError("MAX_PID must be >= 0")

DEFAULT_RED_COUNT = int(os.getenv("DEFAULT_RED_COUNT", "1"))
if DEFAULT_RED_COUNT not in {0, 1, 2, 3}:
	raise RuntimeError("DEFAULT_RED_COUNT must be one of 0, 1, 2, 3")

ALLOWED_ACTIVITY_STATES = {"waiting", "open", "closed"}
INITIAL_ACTIVITY_STATE = os.getenv("INITIAL_ACTIVITY_STATE", "waiting").strip().lower()
if INITIAL_ACTIVITY_STATE not in ALLOWED_ACTIVITY_STATES:
	raise RuntimeError("INITIAL_ACTIVITY_STATE must be waiting, open or closed")

# Dealt rounds older than this cannot be picked
ROUND_TTL_SECONDS = int(os.getenv("ROUND_TTL_SECONDS", "300"))

# Session cookie
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "pid")
SESSION_COOKIE_MAX_AGE = int(os.getenv("SESSION_COOKIE_MAX_AGE", str(7 * 24 * 3600)))

CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

# Optional activity window applied by the worker (ISO-8601)
ACTIVITY_START_AT = os.getenv("ACTIVITY_START_AT") or None
ACTIVITY_END_AT = os.getenv("ACTIVITY_END_AT") or None
WORKER_INTERVAL_SECONDS = int(os.getenv("WORKER_INTERVAL_SECONDS", "5"))
