"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/                  # Fast, isolated tests (no database)
    │   ├── authgate/          # Callbacks (claim shaper, redirect policy)
    │   ├── authgate_auth/     # Passwords, tokens, cookies, CSRF, engine config
    │   ├── authgate_config/   # Settings validation
    │   └── presentation/      # CLI
    ├── authgate_identity/     # Identity domain tests (users, accounts)
    │   ├── unit/
    │   └── integration/       # Repositories on in-memory SQLite
    └── integration/
        └── api/               # Full app through TestClient on temp-file SQLite
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from authgate_config import clear_settings_cache

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")
elif (CONFIG_DIR / ".env").exists():
    load_dotenv(CONFIG_DIR / ".env")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Every test sees settings built from its own environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()
