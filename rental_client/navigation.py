from __future__ import annotations

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class Navigator:
    """Where the front end should go next.

    The API client redirects here on a forced logout; a front end can pass
    ``on_redirect`` to act on it straight away.
    """

    def __init__(self, on_redirect: Optional[Callable[[str], None]] = None) -> None:
        self.history: List[str] = []
        self._on_redirect = on_redirect

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def redirect(self, path: str) -> None:
        logger.info("Redirecting to %s", path)
        self.history.append(path)
        if self._on_redirect is not None:
            self._on_redirect(path)
