import os.path
import re

from setuptools import find_packages, setup

try:
    # Import all script providers so that ENTRYPOINTS gets populated.
    from resinlib.scripts import envvars, network  # noqa: F401
    from resinlib.scripts.utils import ENTRYPOINTS
except ImportError:
    # Avoid chicken-and-egg dependency requirements during initial installation.
    # This means you need to re-run setup in order to gain script entrypoints.
    ENTRYPOINTS = []


ROOT = os.path.abspath(os.path.dirname(__file__))

README = os.path.join(ROOT, "README.rst")


def version():
    with open(os.path.join(ROOT, "resin", "__init__.py")) as init:
        return re.search(r"""^__version__ = ["'](.+)["']""", init.read(), re.M).group(1)


setup(name="resin-envvars",
      version=version(),
      description="Application and device environment variable management for Resin.",
      long_description=open(README).read(),
      long_description_content_type="text/x-rst",
      platforms=["Any"],
      python_requires=">=3.8",
      install_requires=["docopt", "requests"],
      packages=find_packages(exclude=("tests",)),
      entry_points={"console_scripts": ENTRYPOINTS})
