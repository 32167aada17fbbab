import aiohttp
from typing import Any, Dict, Mapping, Optional, Union
from marshmallow import Schema
from yarl import URL

from addon_operator.types.base import JSON
from .error import AuthenticationError, NotFoundError, RequestError

HEADERS = {
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
    "Content-Type": "application/json; charset=utf-8",
}

"""Default timeout in seconds"""
TIMEOUT: float = 10


class SessionManager:
    """Thin wrapper around an `aiohttp.ClientSession` that maps error statuses
    onto client exceptions and optionally loads responses through a schema."""

    def __init__(
        self,
        headers: Optional[Mapping] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        merged_headers = dict(**HEADERS)
        merged_headers.update(headers or {})
        self.timeout = timeout if timeout is not None else TIMEOUT
        self.headers = merged_headers
        self.session = session or aiohttp.ClientSession(headers=merged_headers)

    async def _handle(
        self,
        res: aiohttp.ClientResponse,
        raise_errors: bool,
        schema: Optional[Schema],
    ) -> Any:
        if res.status == 401:
            raise AuthenticationError("Unauthorized")
        if res.status == 403:
            raise AuthenticationError("Forbidden")
        if res.status == 404:
            raise NotFoundError("Not found")
        if raise_errors and res.status >= 400:
            raise RequestError(res.status, await res.text())
        data = await res.json()
        return data if schema is None else schema.load(data)

    async def get(
        self,
        url: Union[str, URL],
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping] = None,
        raise_errors: bool = True,
        schema: Optional[Schema] = None,
    ) -> Any:
        """Run a wrapped session HTTP GET request.
        Args:
            url: The url to get from.
            params: query string parameters
            headers: A dict adding to and overriding the session headers.
            raise_errors: Whether or not raise errors on GET request result.
            schema: An instance of a `marshmallow.Schema` that represents the object
                to build.
        Returns:
            A JSON dictionary or a constructed object if a schema is passed.
        Raises:
            TypeError: If the schema is a class instead of an instance.
        """
        # Guard against common gotcha, passing schema class instead of instance.
        if isinstance(schema, type):
            raise TypeError("Passed Schema should be an instance not a class.")

        async with self.session.get(
            str(url),
            params=params or {},
            headers=headers or {},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as res:
            return await self._handle(res, raise_errors, schema)

    async def patch(
        self,
        url: Union[str, URL],
        data: Optional[JSON] = None,
        headers: Optional[Mapping] = None,
        raise_errors: bool = True,
        schema: Optional[Schema] = None,
    ) -> Any:
        """Run a wrapped session HTTP PATCH request.
        Args:
            url: The url to patch.
            data: The JSON payload sent as the request body.
            headers: A dict adding to and overriding the session headers.
            raise_errors: Whether or not raise errors on PATCH request.
            schema: An instance of a `marshmallow.Schema` that represents the object
                to build.
        Returns:
            A JSON dictionary or a constructed object if a schema is passed.
        """
        if isinstance(schema, type):
            raise TypeError("Passed Schema should be an instance not a class.")

        async with self.session.patch(
            str(url),
            json=data,
            headers=headers or {},
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        ) as res:
            return await self._handle(res, raise_errors, schema)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}<timeout={self.timeout}>"

    async def close(self) -> None:
        """Close the underlying session"""
        if self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
