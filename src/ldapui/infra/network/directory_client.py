from __future__ import annotations

"""
Directory Service HTTP Client.

Thin JSON client for the directory REST API. Each method performs one
blocking round-trip; every transport error or non-2xx answer is raised
as ``TransportFailure`` and never retried.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests

from ldapui.domain.constants import ROOT_REQUEST
from ldapui.domain.entry_models import Entry
from ldapui.domain.errors import TransportFailure
from ldapui.infra.network.common import DEFAULT_TIMEOUT, JSON_HEADERS, USER_AGENT

logger = logging.getLogger(__name__)


def _path(dn: str) -> str:
    return quote(dn, safe="=,")


class DirectoryClient:
    """
    Client for the ``api/*`` endpoints of the directory service.

    Args:
        base_url: Service root, e.g. ``http://localhost:5000/``.
        auth: Optional ``(username, password)`` for HTTP basic auth.
        timeout: Per-request timeout in seconds.
        verify: Verify TLS certificates.
    """

    def __init__(
            self,
            base_url: str,
            auth: Optional[Tuple[str, str]] = None,
            timeout: float = DEFAULT_TIMEOUT,
            verify: bool = True,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.auth = auth
        self.timeout = timeout
        self.verify = verify

    # -------------------------------------------------------------------------
    # TREE & SCHEMA
    # -------------------------------------------------------------------------

    def fetch_children(self, dn: Optional[str]) -> List[Dict[str, Any]]:
        """
        Fetch one level of the tree.

        Args:
            dn: Parent DN, or None for the directory root.

        Returns:
            List[Dict[str, Any]]: Items with ``dn``, ``hasSubordinates``
            and ``structuralObjectClass``.
        """
        target = _path(dn) if dn else ROOT_REQUEST
        return self._json("get", f"api/tree/{target}") or []

    def fetch_schema(self) -> Dict[str, Any]:
        return self._json("get", "api/schema") or {}

    def whoami(self) -> Optional[str]:
        return self._json("get", "api/whoami")

    def search(self, query: str) -> List[Dict[str, Any]]:
        return self._json("get", f"api/search/{quote(query, safe='')}") or []

    # -------------------------------------------------------------------------
    # ENTRIES
    # -------------------------------------------------------------------------

    def fetch_entry(self, dn: str) -> Entry:
        return self._entry("get", f"api/entry/{_path(dn)}")

    def write_entry(self, dn: str, attrs: Dict[str, List[str]], is_new: bool) -> List[str]:
        """
        Create (PUT) or update (POST) an entry.

        Returns:
            List[str]: Names of the attributes the server reports as changed.
        """
        data = self._json(
            "put" if is_new else "post",
            f"api/entry/{_path(dn)}",
            json=attrs,
            headers=JSON_HEADERS,
        )
        if isinstance(data, dict):
            return list(data.get("changed") or [])
        return []

    def rename_entry(self, dn: str, new_rdn: str) -> Entry:
        return self._entry("get", f"api/rename/{_path(dn)}/{_path(new_rdn)}")

    def delete_entry(self, dn: str) -> None:
        self._request("delete", f"api/entry/{_path(dn)}")

    def check_password(self, dn: str, old: str) -> bool:
        return bool(self._json(
            "post",
            f"api/entry/{_path(dn)}/password",
            json={"check": old},
            headers=JSON_HEADERS,
        ))

    def change_password(self, dn: str, old: Optional[str], new: str) -> None:
        self._request(
            "post",
            f"api/entry/{_path(dn)}/password",
            json={"old": old, "new1": new, "new2": new},
            headers=JSON_HEADERS,
        )

    # -------------------------------------------------------------------------
    # TRANSPORT
    # -------------------------------------------------------------------------

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure(f"Malformed response from {path}: {e}", response.status_code)

    def _entry(self, method: str, path: str) -> Entry:
        data = self._json(method, path)
        if not isinstance(data, dict):
            logger.error(f"Network: {path} returned no entry object.")
            raise TransportFailure(f"Malformed response from {path}: expected an entry object")
        return Entry.from_dict(data)

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """
        Issue one HTTP request and map failures to ``TransportFailure``.
        """
        url = self.base_url + path
        headers = {"User-Agent": USER_AGENT}
        headers.update(kwargs.pop("headers", {}))
        logger.debug(f"{method.upper()} {url}")

        try:
            response = getattr(requests, method)(
                url,
                headers=headers,
                auth=self.auth,
                timeout=self.timeout,
                verify=self.verify,
                **kwargs,
            )
        except requests.exceptions.Timeout:
            logger.error(f"Network: {method.upper()} {url} timed out after {self.timeout}s.")
            raise TransportFailure(f"Request timed out: {url}")
        except requests.exceptions.RequestException as e:
            logger.error(f"Network: communication error on {method.upper()} {url}: {e}")
            raise TransportFailure(str(e))

        if not 200 <= response.status_code < 300:
            logger.error(f"Network: {method.upper()} {url} returned {response.status_code}.")
            raise TransportFailure(response.text or response.reason or "", response.status_code)

        return response
