"""RouterOS API Gateway - JSON over HTTP front for the MikroTik RouterOS API.

Each HTTP request opens a short-lived RouterOS API session, runs at most one
command, and returns the router's data rows as JSON.
"""

__version__ = "0.1.0"
__author__ = "RouterOS Gateway Contributors"

from routeros_gateway.config import Settings, get_settings, load_settings_from_file, set_settings

__all__ = [
    "Settings",
    "__version__",
    "get_settings",
    "load_settings_from_file",
    "set_settings",
]
