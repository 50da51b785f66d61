"""The package's own diagnostic channel.

Modules report through ``get_logger(__name__)``, a thin adapter over the
stdlib logger of the same name. While a diagnostic record is being handled the
current context is marked, so console capture can tell a handler writing the
package's own warnings to a captured stream apart from application output.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_emitting: ContextVar[bool] = ContextVar("release_logger_emitting", default=False)


class DiagnosticLogger(logging.LoggerAdapter):
    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        if not self.isEnabledFor(level):
            return
        token = _emitting.set(True)
        try:
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(level, msg, *args, **kwargs)
        finally:
            _emitting.reset(token)


def get_logger(name: str) -> DiagnosticLogger:
    return DiagnosticLogger(logging.getLogger(name), {})


def emitting() -> bool:
    """True while a diagnostic record from this package is being handled."""
    return _emitting.get()
