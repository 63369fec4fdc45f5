"""Service container for workledger.

``container.py`` declares which protocol implementations the API can reach,
``factory.py`` builds them from settings. The FastAPI lifespan installs one
container per process; endpoints reach it through ``api.deps.Inject``.

Tests never touch the global. They build a ``Container`` over in-memory
repositories (see the root ``conftest.py``) and override ``get_container``.
"""

from typing import TYPE_CHECKING

from workledger.core.container.container import Container
from workledger.core.container.factory import create_container

if TYPE_CHECKING:
    from workledger.core.config import Settings

__all__ = ["Container", "create_container", "container", "initialize_container", "reset_container"]


container: Container | None = None
"""Process-wide container, set once by ``initialize_container``."""


def initialize_container(settings: "Settings") -> None:
    """Build and install the process-wide container.

    Raises:
        RuntimeError: If a container is already installed.
    """
    global container

    if container is not None:
        raise RuntimeError("Container already initialized; call reset_container() first.")

    container = create_container(settings)


def reset_container() -> None:
    """Drop the process-wide container. Used by tests and shutdown."""
    global container
    container = None
