"""GraphLinker: allow-listed mail gateway over Microsoft Graph."""

__version__ = "0.1.0"
