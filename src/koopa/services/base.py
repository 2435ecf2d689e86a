"""BaseService — shared foundation for koopa services.

Every service receives the :class:`Cascade` built at startup and the
settings of the current invocation.  The cascade is read-only; services
take copies of its shells when they need to add bindings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from koopa.config.cascade import Cascade
    from koopa.config.settings import KoopaSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class KoopaService(BaseService):
            def copy(self, src: Path, dest: Path) -> ServiceResult:
                shells = self._cascade.shells()
                ...
    """

    def __init__(self, cascade: Cascade, settings: KoopaSettings) -> None:
        self._cascade = cascade
        self._settings = settings
