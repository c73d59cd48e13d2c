"""
Entry point for library users, wiring a single client into each service.
"""

from typing import Optional

from resin.devices import DeviceResolver
from resin.network import ConnectivityProbe
from resin.pine import ResourceClient
from resin.settings import Settings

from .plumbing.envvars import DeviceEnvironmentVariableService, EnvironmentVariableService


class SDK:
    """
    Handle to all services, sharing one `ResourceClient`:

        sdk = SDK.from_settings()
        variables = await sdk.environment_variables.get_all_by_application(123)
        await sdk.device_environment_variables.create("my-device", "EDITOR", "vim")

    Pass a `client` to substitute any object with the same coroutine methods.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 client: Optional[ResourceClient] = None):
        self.settings = settings or Settings()
        self.client = client or ResourceClient(self.settings)
        self.devices = DeviceResolver(self.client)
        self.environment_variables = EnvironmentVariableService(self.client)
        self.device_environment_variables = DeviceEnvironmentVariableService(self.client,
                                                                             self.devices)
        self.network = ConnectivityProbe(self.settings)

    @classmethod
    def from_settings(cls, path: Optional[str] = None) -> "SDK":
        """
        Create an SDK from the user's config file and environment.
        """
        return cls(Settings.load(path))

    def __repr__(self) -> str:
        return "<{}: {!r}>".format(self.__class__.__name__, self.settings)
