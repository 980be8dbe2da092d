from __future__ import annotations

USER_AGENT = "ldapui-core/1.0.0"
DEFAULT_TIMEOUT = 10
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}
