"""Loading the mail backend that leaf commands run against.

Backends live in separate distributions. One is selected with a
``"package.module:factory"`` target; the factory is called with no
arguments and must return an object implementing
:class:`mailrepl.commands.MailBackend`.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mailrepl.commands import MailBackend

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The configured backend could not be loaded."""


def load_backend(target: str) -> MailBackend:
    module_name, sep, factory_name = target.partition(":")
    if not sep or not module_name or not factory_name:
        raise BackendError(f"invalid backend target {target!r}, expected 'module:factory'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise BackendError(f"cannot import backend module {module_name!r}: {e}") from e

    factory = getattr(module, factory_name, None)
    if not callable(factory):
        raise BackendError(f"backend module {module_name!r} has no factory {factory_name!r}")

    logger.debug("Building backend from %s", target)
    return factory()
