"""Serialized write boundary for state-changing commands.

Every write command is processed inside ``transaction_boundary()``. The
command handler runs in its own Protean Unit of Work, which commits before the
boundary is released, so a second writer always reads the committed
post-state of the first. Storage and version-check failures are translated
into the engine's error taxonomy on the way out.
"""

import threading
from contextlib import contextmanager

from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain
from sqlalchemy.exc import OperationalError

from logistics.errors import ConcurrencyConflict, NotFound, StorageUnavailable
from logistics.utils.logging import get_logger

logger = get_logger(__name__)

_WRITE_LOCK = threading.RLock()


@contextmanager
def transaction_boundary():
    with _WRITE_LOCK:
        try:
            yield
        except ObjectNotFoundError as exc:
            raise NotFound("The requested record was not found") from exc
        except ExpectedVersionError as exc:
            logger.warning("concurrent_write_rejected", error=type(exc).__name__)
            raise ConcurrencyConflict("The record was modified concurrently, retry the request") from exc
        except (ConnectionError, OperationalError) as exc:
            logger.error("storage_unavailable", error=str(exc))
            raise StorageUnavailable("Storage is temporarily unavailable") from exc


def run_command(command):
    """Process ``command`` synchronously inside the write boundary.

    Returns whatever the command's handler returns.
    """
    with transaction_boundary():
        return current_domain.process(command, asynchronous=False)
