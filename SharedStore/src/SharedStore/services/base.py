import logging

import httpx
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from SharedStore.exc.base import StoreErrorCode
from SharedStore.managers.base import Record, StoreResult

logger = logging.getLogger(__name__)


class RestRecordStore:
    """Record Store client for the fallback REST service.

    Expects the ``{success, data}`` envelope on every collection endpoint under
    ``API_PREFIX``. A 404 on a record path is a missing record; on a collection
    path it means the service does not serve that collection (``NOT_FOUND``).
    """

    name = "rest"
    API_PREFIX: str = "/api"
    TIMEOUT: float = 10

    def __init__(
            self,
            base_url: str,
            *,
            timeout: float = None,
            headers: dict[str, str] = None,
            transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else self.TIMEOUT
        self.headers = {"Content-Type": "application/json", **(headers or {})}
        self.transport = transport

    def _path(self, collection: str, uid: str = None) -> str:
        path = f"{self.API_PREFIX}/{collection}"
        return f"{path}/{uid}" if uid is not None else path

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, method: str, path: str, json: dict = None) -> httpx.Response:
        async with httpx.AsyncClient(
                base_url=self.base_url, headers=self.headers, timeout=self.timeout, transport=self.transport
        ) as client:
            return await client.request(method, path, json=json)

    async def _call(self, collection: str, method: str, path: str, *, json: dict = None) -> StoreResult[dict | None]:
        """Run one request; success carries the decoded body, or None on 404."""
        try:
            resp = await self._request(method, path, json=json)
        except httpx.TransportError as e:
            logger.error(f"❌ Fallback API unreachable ({method} {path}): {e}")
            return StoreResult.failure(StoreErrorCode.TRANSIENT, str(e))
        except httpx.HTTPError as e:
            logger.error(f"❌ Fallback API error ({method} {path}): {e}")
            return StoreResult.failure(StoreErrorCode.UNKNOWN, str(e))

        if resp.status_code == 404:
            return StoreResult.success(None)
        if resp.status_code in (401, 403):
            return StoreResult.failure(StoreErrorCode.AUTHORIZATION_DENIED, resp.text)
        if resp.status_code == 400:
            return StoreResult.failure(StoreErrorCode.VALIDATION, resp.text)
        if resp.is_error:
            logger.error(f"❌ Fallback API {method} {path} returned HTTP {resp.status_code}")
            return StoreResult.failure(StoreErrorCode.UNKNOWN, f"HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError:
            return StoreResult.failure(StoreErrorCode.MALFORMED, f"{collection}: response is not JSON")
        if not isinstance(body, dict) or body.get("success") is not True:
            return StoreResult.failure(StoreErrorCode.MALFORMED, f"{collection}: unexpected envelope")
        return StoreResult.success(body)

    async def get_all(self, collection: str) -> StoreResult[list[Record]]:
        result = await self._call(collection, "GET", self._path(collection))
        if not result.ok:
            return result
        if result.value is None:
            return StoreResult.failure(StoreErrorCode.NOT_FOUND, f"{collection}: no such collection endpoint")
        data = result.value.get("data", [])
        if not isinstance(data, list):
            return StoreResult.failure(StoreErrorCode.MALFORMED, f"{collection}: data is not a list")
        return StoreResult.success(data)

    async def get_by_id(self, collection: str, uid: str) -> StoreResult[Record | None]:
        result = await self._call(collection, "GET", self._path(collection, uid))
        if not result.ok or result.value is None:
            return result
        data = result.value.get("data")
        if not isinstance(data, dict):
            return StoreResult.failure(StoreErrorCode.MALFORMED, f"{collection}: data is not an object")
        return StoreResult.success(data)

    async def create(self, collection: str, fields: dict) -> StoreResult[str]:
        result = await self._call(collection, "POST", self._path(collection), json=fields)
        if not result.ok:
            return result
        if result.value is None:
            return StoreResult.failure(StoreErrorCode.NOT_FOUND, f"{collection}: no such collection endpoint")
        data = result.value.get("data")
        if not isinstance(data, dict) or not data.get("id"):
            return StoreResult.failure(StoreErrorCode.MALFORMED, f"{collection}: created record has no id")
        return StoreResult.success(data["id"])

    async def update(self, collection: str, uid: str, partial: dict) -> StoreResult[bool]:
        result = await self._call(collection, "PUT", self._path(collection, uid), json=partial)
        if not result.ok:
            return result
        return StoreResult.success(result.value is not None)

    async def delete(self, collection: str, uid: str) -> StoreResult[bool]:
        result = await self._call(collection, "DELETE", self._path(collection, uid))
        if not result.ok:
            return result
        return StoreResult.success(result.value is not None)
