from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the HTTP client for the directory REST service.
"""

from ldapui.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT
from ldapui.infra.network.directory_client import DirectoryClient

__all__ = [
    "DirectoryClient",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
]
