"""folio: storage and synchronization service for portfolio collections.

The store, auth gate and web API are exposed from their subpackages;
``folio.cli`` is the process entry point.
"""

__all__: list[str] = []
