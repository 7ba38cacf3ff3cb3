"""
Process-level configuration for Quick Alias.

Vault location and logging live here.  Values are read from
environment variables (or a .env file) with sensible defaults.  The
user-facing plugin settings (file pattern, notices, debounce) are persisted
inside the vault instead; see ``quick_alias.services.settings``.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ── Obsidian Vault ────────────────────────────────────────────────────
QUICK_ALIAS_VAULT_PATH = Path(
    os.getenv("QUICK_ALIAS_VAULT_PATH", ".")
)
# Settings blob, relative to the vault root
QUICK_ALIAS_SETTINGS_FILE = os.getenv(
    "QUICK_ALIAS_SETTINGS_FILE", ".obsidian/plugins/quick-alias/data.json"
)

# ── Logging ───────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "quick_alias.log")
