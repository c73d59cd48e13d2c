"""
Generic access to the resource API: filtered, ordered reads and single-record writes.

Resources are named collections (e.g. `environment_variable`) addressed as
`{api_url}/{prefix}/{resource}`, with individual records at `{resource}({id})`.  Reads accept
OData-style query options:

    await client.get("environment_variable", filter={"application": 123},
                     orderby="name asc", expand="application")

HTTP calls are made with `requests`, off the event loop in a single worker thread per client, as a
`requests.Session` may not be used from several threads at once.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

import requests

from .errors import NotFoundError, RequestError, TransportError, ValidationError
from .settings import Settings


LOG = logging.getLogger(__name__)

Record = Dict[str, Any]
"""
A single record, as decoded from the JSON response.
"""

Identifier = Union[int, str]

Filter = Mapping[str, Union[str, int, float, bool]]
"""
Equality filter of field names to values, all of which must match.
"""

VALIDATION_STATUSES = (400, 409, 422)


def _literal(value: Union[str, int, float, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, (int, float)):
        return str(value)
    else:
        return "'{}'".format(str(value).replace("'", "''"))


def encode_filter(filter: Filter) -> str:
    """
    Convert a field-to-value mapping into a `$filter` expression:

        >>> encode_filter({"device": 5, "env_var_name": "it's"})
        "device eq 5 and env_var_name eq 'it''s'"
    """
    return " and ".join("{} eq {}".format(field, _literal(value))
                        for field, value in filter.items())


def query_options(filter: Optional[Filter] = None, orderby: Optional[str] = None,
                  expand: Optional[str] = None) -> Dict[str, str]:
    """
    Build the query string parameters for a read.
    """
    params = {}
    if filter:
        params["$filter"] = encode_filter(filter)
    if orderby:
        params["$orderby"] = orderby
    if expand:
        params["$expand"] = expand
    return params


def check_response(response: requests.Response) -> None:
    """
    Raise an error from the `resin.errors` taxonomy for an unsuccessful response.
    """
    if response.ok:
        return
    status = response.status_code
    msg = "{} {} {}: {}".format(response.request.method if response.request else "?",
                                response.url, status, response.text or response.reason)
    if status == 404:
        cls = NotFoundError
    elif status in VALIDATION_STATUSES:
        cls = ValidationError
    else:
        cls = RequestError
    raise cls(msg, status_code=status, body=response.text)


class ResourceClient:
    """
    Asynchronous CRUD client for named resources.

    One client (and its underlying `requests.Session`) is shared by all services of an `SDK`.
    Requests from concurrent coroutines are queued onto the client's one worker thread, so the
    session is never used by two threads at once.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="resin-pine")
        if settings.token:
            self.session.headers["Authorization"] = "Bearer {}".format(settings.token)

    def url(self, resource: str, id_: Optional[Identifier] = None) -> str:
        url = "{}/{}".format(self.settings.resource_url, resource)
        if id_ is not None:
            url = "{}({})".format(url, id_)
        return url

    def request(self, method: str, resource: str, id_: Optional[Identifier] = None,
                params: Optional[Mapping[str, str]] = None,
                body: Optional[Record] = None) -> requests.Response:
        """
        Make a blocking request against a resource, and check its response status.
        """
        url = self.url(resource, id_)
        LOG.debug("%s %s %r", method, url, params or body or "")
        try:
            response = self.session.request(method, url, params=params, json=body,
                                            timeout=self.settings.request_timeout)
        except requests.RequestException as ex:
            raise TransportError("{} {}: {}".format(method, url, ex)) from ex
        check_response(response)
        return response

    async def _run(self, *args: Any, **kwargs: Any) -> requests.Response:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, partial(self.request, *args, **kwargs))

    async def get(self, resource: str, filter: Optional[Filter] = None,
                  orderby: Optional[str] = None, expand: Optional[str] = None) -> List[Record]:
        """
        Fetch all records of a resource matching the given options.
        """
        response = await self._run("GET", resource, params=query_options(filter, orderby, expand))
        try:
            return response.json()["d"]
        except (ValueError, KeyError, TypeError) as ex:
            raise RequestError("Unexpected response body from {}".format(response.url),
                               status_code=response.status_code, body=response.text) from ex

    async def post(self, resource: str, body: Record) -> Record:
        """
        Create a new record, and return it as stored by the backend.
        """
        response = await self._run("POST", resource, body=body)
        try:
            return response.json()
        except ValueError as ex:
            raise RequestError("Unexpected response body from {}".format(response.url),
                               status_code=response.status_code, body=response.text) from ex

    async def patch(self, resource: str, id_: Identifier, body: Record) -> None:
        """
        Update fields of an existing record.
        """
        await self._run("PATCH", resource, id_, body=body)

    async def delete(self, resource: str, id_: Identifier) -> None:
        """
        Delete a record.
        """
        await self._run("DELETE", resource, id_)
