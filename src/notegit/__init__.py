"""
notegit - export a notebook/note collection to a directory tree and keep it
synchronized with a remote git repository.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("notegit")
except PackageNotFoundError:
    __version__ = "0.3.0"
