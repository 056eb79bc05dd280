"""Centralized credential configuration.

Credentials are read from the environment, optionally seeded from a
``.env`` file in the repository root:

    ZOTERO_API_KEY       - Zotero Web API key
    ZOTERO_LIBRARY_ID    - user ID or group ID
    ZOTERO_LIBRARY_TYPE  - "users" (default) or "groups"
    ZOTERO_API_URL       - API base URL override

This module auto-loads the ZOTERO_* entries of the .env file on import.
Variables already set in the environment take precedence over the file.
"""

import os
from pathlib import Path

# __file__ is src/zotero_library/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
ENV_FILE = REPO_ROOT / ".env"

DEFAULT_API_URL = "https://api.zotero.org"
DEFAULT_LIBRARY_TYPE = "users"
LIBRARY_TYPES = ("users", "groups")
ENV_PREFIX = "ZOTERO_"


def _parse_env_line(line: str) -> tuple[str, str] | None:
    """Parse ``[export ]KEY=value``, returning None for blanks and comments."""
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export ") :]

    key, _, value = line.partition("=")
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key.strip(), value


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Copy ZOTERO_* settings from a .env file into the environment.

    Other keys in the file are ignored, so a .env shared with other tools
    does not leak into this process.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of the variables that were set.
    """
    if not env_path.is_file():
        return {}

    loaded = {}
    for line in env_path.read_text().splitlines():
        parsed = _parse_env_line(line)
        if parsed is None:
            continue
        key, value = parsed
        if key.startswith(ENV_PREFIX) and key not in os.environ:
            os.environ[key] = value
            loaded[key] = value
    return loaded


def normalize_library_type(value: str | None) -> str | None:
    """Map "user"/"group" (any case) to the URL segments "users"/"groups".

    Returns None for values that are not a known library type.
    """
    if value is None:
        return None
    value = value.strip().lower()
    if value in ("user", "group"):
        value += "s"
    return value if value in LIBRARY_TYPES else None


def get_api_url() -> str:
    """Get the API base URL, without a trailing slash."""
    return os.environ.get("ZOTERO_API_URL", DEFAULT_API_URL).rstrip("/")


def get_credential_status() -> dict:
    """Get status of the configured Zotero credentials.

    Returns:
        Dictionary with credential status. Secret values are never included.
    """
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "zotero": {
            "api_key": bool(os.environ.get("ZOTERO_API_KEY")),
            "library_id": bool(os.environ.get("ZOTERO_LIBRARY_ID")),
            "library_type": os.environ.get("ZOTERO_LIBRARY_TYPE", DEFAULT_LIBRARY_TYPE),
            "api_url": get_api_url(),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
