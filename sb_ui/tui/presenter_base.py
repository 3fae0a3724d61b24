from __future__ import annotations

from typing import Protocol

from sb_ui.tui.protocols import Presenter


class PresenterSink(Protocol):
    def emit(self, level: str, message: str) -> None: ...


class PresenterBase(Presenter):
    def __init__(self, sink: PresenterSink) -> None:
        self._sink = sink

    def info(self, message: str) -> None:
        self._sink.emit("info", message)

    def warning(self, message: str) -> None:
        self._sink.emit("warning", message)

    def error(self, message: str) -> None:
        self._sink.emit("error", message)

    def success(self, message: str) -> None:
        self._sink.emit("success", message)
