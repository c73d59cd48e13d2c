"""
Connectivity check against the API, independent of any resource.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Callable, Optional

import requests

from .settings import Settings


LOG = logging.getLogger(__name__)

PING_TIMEOUT = 5.0

OnlineCallback = Callable[[Optional[Exception], bool], None]
"""
Receives `(None, online)`; network failures count as offline rather than errors.
"""


class ConnectivityProbe:

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="resin-ping")

    @property
    def url(self) -> str:
        return "{}/ping".format(self.settings.api_url)

    def ping(self) -> bool:
        """
        Make a blocking request to the API, and return whether it answered successfully.
        """
        try:
            response = self.session.get(self.url, timeout=PING_TIMEOUT)
        except requests.RequestException as ex:
            LOG.debug("Ping failed: %s", ex)
            return False
        LOG.debug("Ping returned %d", response.status_code)
        return response.ok

    async def is_online(self, callback: Optional[OnlineCallback] = None) -> bool:
        """
        Ping the API off the event loop, and report whether it answered, both as the return value
        and to `callback` if given.
        """
        loop = asyncio.get_running_loop()
        online = await loop.run_in_executor(self.executor, self.ping)
        if callback:
            callback(None, online)
        return online
