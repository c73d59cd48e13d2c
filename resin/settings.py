"""
Client configuration, read from defaults, an INI file and the environment, in that order.

The config file (`~/.resinrc`, or the path in `RESINRC_CONFIG`) holds a `[resin]` section:

    [resin]
    api_url = https://api.resin.io
    token = ...

Each key can be overridden by an upper-cased environment variable with a `RESINRC_` prefix, e.g.
`RESINRC_API_URL`.
"""

import configparser
import logging
import os
import os.path
from typing import Any, Dict, Mapping, Optional


LOG = logging.getLogger(__name__)

SECTION = "resin"

ENV_PREFIX = "RESINRC_"

DEFAULTS: Dict[str, Any] = {"api_url": "https://api.resin.io",
                            "api_prefix": "ewa",
                            "token": None,
                            "request_timeout": 30.0}


def default_path() -> str:
    return os.getenv(ENV_PREFIX + "CONFIG") or os.path.expanduser("~/.resinrc")


class Settings:
    """
    Connection details for the API.  Construct directly, or use `Settings.load` to pick up the
    user's config file and environment.
    """

    def __init__(self, api_url: str = DEFAULTS["api_url"], api_prefix: str = DEFAULTS["api_prefix"],
                 token: Optional[str] = DEFAULTS["token"],
                 request_timeout: float = DEFAULTS["request_timeout"]):
        self.api_url = api_url.rstrip("/")
        self.api_prefix = api_prefix.strip("/")
        self.token = token
        self.request_timeout = float(request_timeout)

    @classmethod
    def load(cls, path: Optional[str] = None,
             environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the defaults, overlaid with the config file then the environment.

        A missing config file is not an error.
        """
        values = dict(DEFAULTS)
        path = path or default_path()
        parser = configparser.ConfigParser()
        if parser.read(path):
            LOG.debug("Read settings from %r", path)
            if parser.has_section(SECTION):
                for key in DEFAULTS:
                    if parser.has_option(SECTION, key):
                        values[key] = parser.get(SECTION, key)
        environ = os.environ if environ is None else environ
        for key in DEFAULTS:
            env = environ.get(ENV_PREFIX + key.upper())
            if env:
                values[key] = env
        return cls(**values)

    @property
    def resource_url(self) -> str:
        """
        Root URL of the resource API, e.g. `https://api.resin.io/ewa`.
        """
        return "{}/{}".format(self.api_url, self.api_prefix)

    def __repr__(self) -> str:
        return "<{}: {} {}>".format(self.__class__.__name__, self.resource_url,
                                    "authenticated" if self.token else "anonymous")
