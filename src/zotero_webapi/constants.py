"""
Constants for the Zotero Web API client

Fixed protocol values of the Zotero Web API v3 and the defaults used by the
request builder and the local credential store.
"""

from .version import __version__

__all__ = [
    # Zotero Web API
    "ZOTERO_API_BASE_URL",
    "ZOTERO_API_VERSION",
    "API_KEYS_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "ALLOWED_VERBS",
    "USER_AGENT",
    # Request headers
    "API_VERSION_HEADER",
    "API_KEY_HEADER",
    "LIBRARY_VERSION_HEADER",
    # Credential profiles
    "LIBRARY_TYPES",
    "PRIVACY_SETTINGS",
    "APP_NAMESPACE",
    "PROFILE_SUFFIX",
]

# Zotero Web API configuration
ZOTERO_API_BASE_URL = "https://api.zotero.org"
ZOTERO_API_VERSION = "3"
API_KEYS_URL = "https://www.zotero.org/settings/keys"
DEFAULT_TIMEOUT_SECONDS = 20
ALLOWED_VERBS = ("GET", "POST")
USER_AGENT = f"zotero-webapi/{__version__}"

# Header names
API_VERSION_HEADER = "Zotero-API-Version"
API_KEY_HEADER = "Zotero-API-Key"
LIBRARY_VERSION_HEADER = "Last-Modified-Version"

# Credential profile values
LIBRARY_TYPES = ("users", "groups")
PRIVACY_SETTINGS = ("private", "public")

# Profiles live under ~/<APP_NAMESPACE>/<name><PROFILE_SUFFIX>
APP_NAMESPACE = ".zotero_webapi"
PROFILE_SUFFIX = ".json"
