"""Host adapters implementing :class:`~netswitch.contracts.host.MultisiteHost`."""
from __future__ import annotations

import logging

from netswitch.contracts.host import MultisiteHost
from netswitch.core.config import Settings
from netswitch.core.loader import import_attr

logger = logging.getLogger(__name__)


def create_host(settings: Settings) -> MultisiteHost:
    """Build the configured host adapter.

    ``host_backend`` is ``"memory"``, ``"sql"`` or an import path
    (``"package.module:factory"``) to a callable taking the settings.
    """
    backend = settings.host_backend
    if backend == "memory":
        from netswitch.hosts.memory import load_memory_host

        return load_memory_host(settings.host_config_paths)
    if backend == "sql":
        from netswitch.hosts.sql import create_sql_host

        return create_sql_host(settings)

    factory = import_attr(backend)
    host = factory(settings)
    if not isinstance(host, MultisiteHost):
        raise TypeError(f"Host factory '{backend}' returned {type(host).__name__}")
    logger.info("Using custom host adapter %s", type(host).__name__)
    return host
