"""Our Groceries credentials and defaults.

Credentials live in pantry/og_credentials.py, which is not checked in:

    OG_USERNAME = "me@example.com"
    OG_PASSWORD = "..."
    DEFAULT_LIST_NAME = "Costco"   # optional, defaults to "Shopping List"

If that module is missing, the OG_USERNAME, OG_PASSWORD and
PANTRY_DEFAULT_LIST environment variables are used instead.
"""

import os

DEFAULT_LIST_NAME = "Shopping List"


def _credentials_module():
    try:
        from pantry import og_credentials
    except ImportError:
        return None
    return og_credentials


def load_credentials():
    """Return (username, password), or (None, None) when not configured."""
    mod = _credentials_module()
    if mod is not None:
        return getattr(mod, "OG_USERNAME", None), getattr(mod, "OG_PASSWORD", None)
    return os.environ.get("OG_USERNAME"), os.environ.get("OG_PASSWORD")


def default_list_name():
    mod = _credentials_module()
    if mod is not None and getattr(mod, "DEFAULT_LIST_NAME", None):
        return mod.DEFAULT_LIST_NAME
    return os.environ.get("PANTRY_DEFAULT_LIST") or DEFAULT_LIST_NAME
