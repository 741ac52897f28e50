"""Now Playing Card: animated SVG now-playing widget with a player poller"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("now-playing-card")
except PackageNotFoundError:
    __version__ = "dev"
