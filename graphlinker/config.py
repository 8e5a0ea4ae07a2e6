"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths are relative to the working directory unless GRAPHLINKER_HOME is set
PROJECT_ROOT = Path(os.getenv("GRAPHLINKER_HOME", "").strip() or Path.cwd()).resolve()
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Gateway config file (azure_ad section with allowed accounts)
GATEWAY_CONFIG_PATH = Path(
    os.getenv("GATEWAY_CONFIG_PATH", "").strip() or PROJECT_ROOT / "config" / "gateway.yaml"
)

# Shared secret expected in the X-API-KEY header
API_KEY_HEADER_NAME = "X-API-KEY"
GATEWAY_API_KEY = os.getenv("GATEWAY_API_KEY", "")

# HTTP server
GATEWAY_HOST = os.getenv("GATEWAY_HOST", "0.0.0.0")
GATEWAY_PORT = int(os.getenv("GATEWAY_PORT", "8000"))

# Mock provider (local runs without Azure)
MOCK_INBOX_PATH = Path(os.getenv("MOCK_INBOX_PATH", "").strip() or DATA_DIR / "inbox.json")
MOCK_SENT_ITEMS_PATH = Path(
    os.getenv("MOCK_SENT_ITEMS_PATH", "").strip() or OUTPUT_DIR / "sent_items.json"
)

# Logging
LOG_FILE = Path(os.getenv("LOG_FILE", "").strip() or OUTPUT_DIR / "logs" / "app.jsonl")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() == "true"

# Graph API
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
DEFAULT_FOLDER = "Inbox"
DEFAULT_TOP = 10
