"""Google Wallet offer-pass walkthrough: classes, objects, save links and batch inserts."""

from .auth import AuthError, ServiceAccount
from .client import WalletApiError, WalletClient, WalletConflictError
from .config import ConfigError, Settings

__version__ = "0.1.0"
__all__ = [
    "AuthError",
    "ConfigError",
    "ServiceAccount",
    "Settings",
    "WalletApiError",
    "WalletClient",
    "WalletConflictError",
]
