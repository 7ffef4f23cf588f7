"""CodGuard gate - COD rating check at checkout and bundled order sync."""

__version__ = "2.2.0"
