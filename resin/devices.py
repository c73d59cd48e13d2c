"""
Device lookup by name.
"""

import logging

from .errors import NotFoundError
from .pine import Record, ResourceClient


LOG = logging.getLogger(__name__)

RESOURCE = "device"


class DeviceResolver:
    """
    Translate human-readable device names into device records.  Nothing is cached: every lookup is
    a fresh request.
    """

    def __init__(self, client: ResourceClient):
        self.client = client

    async def get_by_name(self, name: str) -> Record:
        """
        Fetch the device with the given name, raising `NotFoundError` if there isn't one.

        Device names aren't guaranteed unique; if several match, the oldest (lowest id) wins.
        """
        devices = await self.client.get(RESOURCE, filter={"name": name}, orderby="id asc")
        if not devices:
            raise NotFoundError("Device not found: {}".format(name))
        if len(devices) > 1:
            LOG.warning("Device name %r is ambiguous (%d matches), using id %r",
                        name, len(devices), devices[0]["id"])
        LOG.debug("Resolved device %r to id %r", name, devices[0]["id"])
        return devices[0]
