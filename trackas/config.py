import os

from trackas.admission import DEFAULT_THRESHOLD_METERS, validate_threshold


def _flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


# 1. Database (Render sets DATABASE_URL; locally we default to SQLite)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./trackas.db")

# Render provides 'postgres://', but SQLAlchemy requires 'postgresql://'
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# Seconds a lookup or ledger write may wait before failing
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# 2. Session cookie
SECRET_KEY = os.getenv("SECRET_KEY", "trackas-dev-secret-change-me")

# 3. Attendance rules
ATTENDANCE_THRESHOLD_METERS = validate_threshold(
    os.getenv("ATTENDANCE_THRESHOLD_METERS", str(DEFAULT_THRESHOLD_METERS))
)
ATTENDANCE_AUTO_SWAP = _flag("ATTENDANCE_AUTO_SWAP", True)

# Unset: the stored status follows the threshold the student was admitted against.
_status_threshold = os.getenv("ATTENDANCE_STATUS_THRESHOLD_METERS")
ATTENDANCE_STATUS_THRESHOLD_METERS = validate_threshold(_status_threshold) if _status_threshold else None

# 4. Links handed to students (falls back to the request's base URL)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")

# 5. Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")
