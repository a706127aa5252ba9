"""Logging del harness.

stdlib `logging` renderizado con `rich.logging.RichHandler`. El cliente HTTP no
conoce `logging`: recibe un `HarnessLogger` (info/warn/error + datos
estructurados) y estas implementaciones lo conectan con el logger de proceso.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "randomuser_harness"

_configured = False


def configure_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> None:
    """Instala un `RichHandler` en el logger del paquete (idempotente)."""

    global _configured

    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level)
    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s :: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(context: str) -> logging.Logger:
    return logging.getLogger(f"{PACKAGE_LOGGER}.{context}")


def _format_data(data: Any) -> str:
    if data is None:
        return ""
    try:
        return json.dumps(data, ensure_ascii=False, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return repr(data)


class StdHarnessLogger:
    """`HarnessLogger` sobre `logging.Logger`.

    Los datos estructurados se adjuntan como `extra["data"]` y se añaden al
    mensaje como JSON compacto.
    """

    def __init__(self, context: str) -> None:
        self.context = context
        self._logger = get_logger(context)

    def _log(self, level: int, message: str, data: Any | None) -> None:
        if not self._logger.isEnabledFor(level):
            return
        suffix = _format_data(data)
        text = f"{message} {suffix}" if suffix else message
        self._logger.log(level, text, extra={"data": data})

    def info(self, message: str, data: Any | None = None) -> None:
        self._log(logging.INFO, message, data)

    def warn(self, message: str, data: Any | None = None) -> None:
        self._log(logging.WARNING, message, data)

    def error(self, message: str, data: Any | None = None) -> None:
        self._log(logging.ERROR, message, data)


class NullHarnessLogger:
    """Descarta todo; se usa cuando `enable_logging` es False."""

    def info(self, message: str, data: Any | None = None) -> None:
        return None

    def warn(self, message: str, data: Any | None = None) -> None:
        return None

    def error(self, message: str, data: Any | None = None) -> None:
        return None
