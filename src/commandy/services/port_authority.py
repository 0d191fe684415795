from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True)
class PortAuthorityError(Exception):
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} | status={self.status_code}"
        return self.message


class PortAuthorityClient:
    """Read-only client for the Port Authority registry API."""

    def __init__(self, api_url: str, timeout: float = 10.0):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def fetch_ports(self) -> Any:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(f"{self.api_url}/ports")
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PortAuthorityError("Port Authority request failed", exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            raise PortAuthorityError(f"Port Authority unreachable: {exc}") from exc
        try:
            return response.json()
        except ValueError:
            return response.text

    def registered_ports_text(self) -> str:
        return format_ports(self.fetch_ports())


def format_ports(payload: Any) -> str:
    if isinstance(payload, dict):
        payload = payload.get("ports", payload)
    if isinstance(payload, list):
        if not payload:
            return "No ports registered"
        lines = []
        for entry in payload:
            if isinstance(entry, dict):
                port = entry.get("port", "?")
                owner = entry.get("project") or entry.get("name") or entry.get("service") or ""
                lines.append(f"Port {port}: {owner}".rstrip(": "))
            else:
                lines.append(str(entry))
        return "\n".join(lines)
    if isinstance(payload, dict):
        return "\n".join(f"{key}: {value}" for key, value in payload.items())
    return str(payload).strip()
