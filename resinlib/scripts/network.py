"""
Scripts to check connectivity to the API.
"""

from .utils import entrypoint, error
from ..sdk import SDK


@entrypoint
async def online(sdk: SDK):
    """
    Check whether the API can be reached, exiting with status 1 if not.

    Usage: {script}
    """
    if await sdk.network.is_online():
        print("Online: {}".format(sdk.settings.api_url))
    else:
        error("Offline: {}".format(sdk.settings.api_url), exit=1)
