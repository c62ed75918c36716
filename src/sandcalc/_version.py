"""Installed version of sandcalc."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sandcalc")
except PackageNotFoundError:
    __version__ = "0.0.0"
