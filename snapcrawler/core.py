"""
FILE DESCRIPTION: Foundational module for global configuration and logging.
KEY FUNCTIONS/CLASSES: setup_logger, CompanyFormatter, crawl/render/storage limits
"""

import logging
import sys
import os
from datetime import datetime, timezone
from pathlib import Path
from dotenv import load_dotenv

# === CONFIGURATION SECTION ===

load_dotenv(Path(__file__).resolve().parents[1] / '.env')


def _env_list(name, default):
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


# Crawl budgets
MAX_PAGES = int(os.getenv("MAX_PAGES", 25))
GLOBAL_TIMEOUT = float(os.getenv("GLOBAL_TIMEOUT", 300))  # seconds per job
PAGE_TIMEOUT = float(os.getenv("PAGE_TIMEOUT", 120))      # seconds per page

# Artifact caps (bytes)
MAX_HTML_SIZE = int(os.getenv("MAX_HTML_SIZE", 5 * 1024 * 1024))
MAX_SCREENSHOT_SIZE = int(os.getenv("MAX_SCREENSHOT_SIZE", 10 * 1024 * 1024))

# Input limits
MAX_URL_LENGTH = 2048
MAX_EMAIL_LENGTH = 254
MAX_ARCHIVE_FILES = int(os.getenv("MAX_ARCHIVE_FILES", 100))

# Playwright / rendering waiting periods (seconds)
MAX_SCROLL_ATTEMPTS = int(os.getenv("MAX_SCROLL_ATTEMPTS", 10))
SCROLL_DELAY = float(os.getenv("SCROLL_DELAY", 0.5))
SETTLE_DELAY = float(os.getenv("SETTLE_DELAY", 1.0))
VIEWPORT_WIDTH = int(os.getenv("VIEWPORT_WIDTH", 1920))
VIEWPORT_HEIGHT = int(os.getenv("VIEWPORT_HEIGHT", 1080))
SCREENSHOT_QUALITY = int(os.getenv("SCREENSHOT_QUALITY", 80))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36",
)

# Storage
STORAGE_DIR = Path(os.getenv("STORAGE_DIR", Path(__file__).resolve().parents[1] / "data"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8080/files")

# Pages about policies and terms are not worth a snapshot
EXCLUDED_KEYWORDS = _env_list("EXCLUDED_KEYWORDS", [
    "privacy", "policy", "terms", "conditions",
    "cookie", "legal", "disclaimer", "gdpr",
])

# Non-web service ports a seed may never point at
BLOCKED_PORTS = {int(p) for p in _env_list("BLOCKED_PORTS", [
    "22", "23", "25", "53", "110", "135", "139", "143", "445",
    "1433", "1521", "2375", "3306", "3389", "5432", "5984",
    "6379", "9200", "11211", "27017",
])}

# Third-party analytics, ads and widgets aborted during rendering
BLOCKED_DOMAINS = _env_list("BLOCKED_DOMAINS", [
    "google-analytics.com", "googletagmanager.com", "googlesyndication.com", "googleadservices.com",
    "doubleclick.net", "adservice.google.com", "ads.google.com",
    "facebook.com/tr", "facebook.net", "connect.facebook.net",
    "hotjar.com", "clarity.ms",
    "linkedin.com/analytics", "licdn.com",
    "cookielaw.org", "pixel.cookielaw.com",
    "analytics.google.com", "stats.g.doubleclick.net",
    "sentry.io", "segment.io", "intercom.io", "fullstory.com", "newrelic.com",
    "cloudflareinsights.com", "onesignal.com",
    "crisp.chat", "drift.com", "freshchat.com", "zendesk.com",
    "vimeo.com/api", "youtube.com/api",
    "maps.google.com", "maps.googleapis.com",
    "fonts.googleapis.com", "fonts.gstatic.com", "use.typekit.net",
    "stripe.com", "paypal.com",
    "platform.twitter.com", "platform.linkedin.com", "platform.instagram.com",
    "gravatar.com", "googletagservices.com",
    "cdn.taboola.com", "cdn.outbrain.com",
    "bing.com/analytics", "bat.bing.com",
])

LOG_FILE = os.getenv("LOG_FILE") or None


# === LOGGING SECTION ===

class CompanyFormatter(logging.Formatter):
    """
    FLOW: Receives a log record -> Extracts timestamp -> Formats according to company standard
    (e.g., [ Tue Jan 06 05:32:41 AM UTC 2026 ]) -> Prepends level and context -> Returns final string.
    """
    def format(self, record):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        timestamp = dt.strftime("%a %b %d %I:%M:%S %p UTC %Y")
        context = getattr(record, 'context', 'root')
        line = f"[ {timestamp} ] : {record.levelname} : {context} : {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logger(name="snapcrawler", log_file=None, level=logging.INFO):
    """
    FLOW: Initializes/Retrieves logger -> Checks for existing handlers to prevent duplicates ->
    Sets propagation for child loggers -> Attaches Console and optional File handlers with CompanyFormatter.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    if name != "snapcrawler":
        logger.propagate = True
        setup_logger("snapcrawler", log_file=log_file, level=level)
        return logger

    formatter = CompanyFormatter()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (optional)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


# Global logger instance
logger = setup_logger(log_file=LOG_FILE)
