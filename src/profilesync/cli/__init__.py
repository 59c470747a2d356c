"""profilesync CLI: sync settings profiles with WebDAV or git."""

from ._helpers import main  # noqa: F401  entry point

# Import command modules to register Click commands with the main group.
from . import _basic, _profiles, _watch  # noqa: F401
