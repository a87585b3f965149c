import configparser
import os
import logging

# Get base directory
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.getenv("CONTRACT_TRACKER_CONFIG", os.path.join(BASE_DIR, "config.ini"))
LOG_PATH = os.path.join(BASE_DIR, "app.log")

def setup_logging():
    logging.basicConfig(
        filename=LOG_PATH,
        level=logging.DEBUG,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s'
    )

setup_logging()

logger = logging.getLogger(__name__)

# Load config
config = configparser.ConfigParser()
config.read(CONFIG_PATH)

logger.info("Loaded configuration from %s", CONFIG_PATH)
if not config.sections():
    logger.warning("No sections found in config.ini")
    raise RuntimeError("config.ini is missing or empty")

# Settings
MODE = config.get("settings", "mode", fallback="DEBUG")
WORKBOOK_PATH = config.get("workbook", "path", fallback=os.path.join(BASE_DIR, "tracker.xlsx"))
if not os.path.isabs(WORKBOOK_PATH):
    WORKBOOK_PATH = os.path.join(BASE_DIR, WORKBOOK_PATH)

# Sheet names
FORM_SHEET_NAME = config.get("sheets", "form_responses", fallback="Form Responses")
TRACKER_SHEET_NAME = config.get("sheets", "tracker", fallback="Tracker")
ARCHIVE_SHEET_NAME = config.get("sheets", "archive", fallback="Archive")
RENEWAL_STATUS_SHEET_NAME = config.get("sheets", "renewal_status", fallback="Renewal Status")

# SMTP
SMTP_HOST = config.get("smtp", "host", fallback="")
SMTP_PORT = config.getint("smtp", "port", fallback=587)
SMTP_USER = config.get("smtp", "user", fallback="")
SMTP_PASSWORD = config.get("smtp", "password", fallback="")
SMTP_FROM = config.get("smtp", "from", fallback=SMTP_USER)
SMTP_DISPLAY_NAME = config.get("smtp", "display_name", fallback="Contract Desk")
SMTP_USE_TLS = config.getboolean("smtp", "use_tls", fallback=True)
SMTP_TIMEOUT = config.getfloat("smtp", "timeout", fallback=20.0)

# Reminders (days before contract end)
REMINDER_DAYS = [
    int(day.strip())
    for day in config.get("reminders", "days_before_end", fallback="60,30,7").split(",")
    if day.strip()
]

# URLs
SQLITE_DATABASE_URL = f"sqlite:///{os.path.join(BASE_DIR, 'activity.db')}"
PRODUCTION_DATABASE_URL = config.get("database", "url", fallback=SQLITE_DATABASE_URL)

# Cache TTLs
CACHE_TTL_PENDING_CHANGES = 600  # 10 minutes to confirm or reject a contract start change
