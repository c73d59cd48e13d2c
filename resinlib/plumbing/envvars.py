"""
Environment variables, scoped either to an application or to a single device.

The two namespaces mirror each other, with a few differences on the backend:

- application variables live in `environment_variable`, owned by `application`, named by `name`
- device variables live in `device_environment_variable`, owned by `device`, named by
  `env_var_name`

Device-scoped operations take a device name, which is resolved to an id on every call.
"""

import logging
from typing import List, Mapping

from resin.devices import DeviceResolver
from resin.pine import Identifier, Record, ResourceClient

from .common import deferred


LOG = logging.getLogger(__name__)

SYSTEM_PREFIX = "RESIN_"
"""
Names starting with this prefix are reserved for variables interpreted by the platform itself.
"""


def is_system_variable(variable: Mapping[str, str], field: str = "name") -> bool:
    """
    Test if a variable is a system variable, based on its name.  Performs no I/O.
    """
    return variable[field].startswith(SYSTEM_PREFIX)


class _VariableService:
    """
    Operations common to both namespaces, which address a variable by its own id.
    """

    resource: str
    name_field: str

    def __init__(self, client: ResourceClient):
        self.client = client

    def is_system_variable(self, variable: Mapping[str, str]) -> bool:
        """
        Test if a variable is a system variable, e.g. `RESIN_SUPERVISOR`.
        """
        return is_system_variable(variable, self.name_field)

    @deferred
    async def update(self, var_id: Identifier, value: str) -> None:
        """
        Replace the value of a variable.  Its name and owner can't be changed.
        """
        await self.client.patch(self.resource, var_id, {"value": value})

    @deferred
    async def remove(self, var_id: Identifier) -> None:
        """
        Delete a variable.  Whether a missing variable is an error is up to the backend.
        """
        await self.client.delete(self.resource, var_id)


class EnvironmentVariableService(_VariableService):
    """
    Variables shared by all devices of an application.
    """

    resource = "environment_variable"
    name_field = "name"

    @deferred
    async def get_all_by_application(self, application_id: Identifier) -> List[Record]:
        """
        Fetch all variables of an application, ordered by name.
        """
        return await self.client.get(self.resource, filter={"application": application_id},
                                     orderby="name asc")

    @deferred
    async def create(self, application_id: Identifier, name: str, value: str) -> Identifier:
        """
        Create a variable for an application, and return its id.
        """
        record = await self.client.post(self.resource, {"application": application_id,
                                                        "name": name,
                                                        "value": value})
        LOG.debug("Created variable %r for application %r: %r", name, application_id, record["id"])
        return record["id"]


class DeviceEnvironmentVariableService(_VariableService):
    """
    Variables of a single device, addressed by the device's name.
    """

    resource = "device_environment_variable"
    name_field = "env_var_name"

    def __init__(self, client: ResourceClient, resolver: DeviceResolver):
        super().__init__(client)
        self.resolver = resolver

    async def _device_id(self, device_name: str) -> Identifier:
        # Raises NotFoundError before anything touches the variable resource.
        device = await self.resolver.get_by_name(device_name)
        return device["id"]

    @deferred
    async def get_all(self, device_name: str) -> List[Record]:
        """
        Fetch all variables of a device, ordered by name, with the device record expanded.
        """
        device_id = await self._device_id(device_name)
        return await self.client.get(self.resource, filter={"device": device_id},
                                     orderby="env_var_name asc", expand="device")

    @deferred
    async def create(self, device_name: str, name: str, value: str) -> Identifier:
        """
        Create a variable for a device, and return its id.
        """
        device_id = await self._device_id(device_name)
        record = await self.client.post(self.resource, {"device": device_id,
                                                        "env_var_name": name,
                                                        "value": value})
        LOG.debug("Created variable %r for device %r: %r", name, device_name, record["id"])
        return record["id"]
