"""Global configuration for the Community Digest."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Slack
SLACK_BOT_TOKEN = os.getenv("SLACK_BOT_TOKEN")
SLACK_CHANNEL_ID = os.getenv("SLACK_CHANNEL_ID")
SLACK_API_URL = os.getenv("SLACK_API_URL", "https://slack.com/api")

# Log digests instead of posting them (default on so a fresh checkout never posts)
DRY_RUN = _env_flag("DRY_RUN", True)

# Digest window and message filters
DIGEST_WINDOW_HOURS = int(os.getenv("DIGEST_WINDOW_HOURS", "24"))
MIN_MESSAGE_LENGTH = int(os.getenv("MIN_MESSAGE_LENGTH", "10"))
EXCLUDE_COMMANDS = _env_flag("EXCLUDE_COMMANDS", True)
EXCLUDE_LINK_ONLY = _env_flag("EXCLUDE_LINK_ONLY", True)

# Topic clustering
TOPIC_GAP_MINUTES = int(os.getenv("TOPIC_GAP_MINUTES", "20"))
MAX_TOPIC_PARTICIPANTS = int(os.getenv("MAX_TOPIC_PARTICIPANTS", "6"))

# Append "Participants:" lines the summariser forgot
ATTRIBUTION_FALLBACK_ENABLED = _env_flag("ATTRIBUTION_FALLBACK_ENABLED", True)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("DIGEST_LOG_DIR", Path(os.getenv("LOCALAPPDATA", ".")) / "community-digest" / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
