from __future__ import annotations

import threading

from autoreg.exceptions import AutoregOperationCancelledError


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and a pass.

    The caller calls ``cancel`` from any thread; the resolver and the
    synthesizer poll the token between top-level items.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def raise_if_cancellation_requested(self) -> None:
        """Raise ``AutoregOperationCancelledError`` once ``cancel`` has been called."""
        if self.is_cancellation_requested:
            msg = "Generation pass was cancelled."
            raise AutoregOperationCancelledError(msg)


class _NeverCancelledToken(CancellationToken):
    __slots__ = ()

    def cancel(self) -> None:
        msg = "The shared NONE token cannot be cancelled; create a CancellationToken instead."
        raise TypeError(msg)


NONE = _NeverCancelledToken()
"""Token that is never cancelled; the default for callers without one."""
