"""Firebase Realtime Database backend.

Reads the ``schools`` node through the database's REST interface
(``GET {database_url}/schools.json``).  No Firebase SDK is needed: the REST
API returns the node as plain JSON.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from edubot.db.base import SchoolRepository, UpstreamFetchError

logger = logging.getLogger(__name__)

_HTTP_TIMEOUT = 30.0
_SCHOOLS_PATH = "schools"


class FirebaseSchoolRepository(SchoolRepository):
    """Read-only access to the ``schools`` node of a Firebase Realtime Database.

    Parameters
    ----------
    database_url:
        Root URL of the database, e.g.
        ``https://<project>-default-rtdb.<region>.firebasedatabase.app``.
    auth_token:
        Optional database secret or ID token, sent as the ``auth`` query
        parameter.
    timeout:
        Request timeout in seconds.
    transport:
        Optional httpx transport, used by tests to stub the database.
    """

    def __init__(
        self,
        database_url: str,
        auth_token: str | None = None,
        timeout: float = _HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{database_url.rstrip('/')}/{_SCHOOLS_PATH}.json"
        self._auth_token = auth_token
        self._timeout = timeout
        self._transport = transport

    async def fetch_all_schools(self) -> list[dict[str, Any]]:
        params = {"auth": self._auth_token} if self._auth_token else None
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error("Firebase returned HTTP %d for %s", exc.response.status_code, self._url)
            raise UpstreamFetchError(f"HTTP error while fetching schools: {exc.response.status_code}") from exc
        except httpx.RequestError as exc:
            logger.error("Network error while fetching schools: %s", exc)
            raise UpstreamFetchError(f"Network error while fetching schools: {exc}") from exc
        except ValueError as exc:
            raise UpstreamFetchError("Firebase returned a non-JSON body") from exc

        return _node_to_records(payload)


def _node_to_records(node: Any) -> list[dict[str, Any]]:
    """Flatten a Realtime Database node into a list of school records.

    The node is ``null`` when empty, an object keyed by push id in the usual
    case, or an array (with ``null`` holes) when children use integer keys.
    """
    if node is None:
        return []
    if isinstance(node, dict):
        children = list(node.values())
    elif isinstance(node, list):
        children = node
    else:
        raise UpstreamFetchError(f"Unexpected schools node of type {type(node).__name__}")

    records: list[dict[str, Any]] = []
    for child in children:
        if child is None:
            continue
        if not isinstance(child, dict):
            logger.warning("Skipping non-object school entry: %r", child)
            continue
        records.append(child)
    return records
