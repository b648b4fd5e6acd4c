from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, QTimer


class QtTimerHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer = timer

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def cancel(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._timer.deleteLater()


class QtScheduler(QObject):
    """``call_later`` on the Qt event loop, for Throttle.

    Timers are parented to the scheduler so dropping a handle from inside
    its own timeout never deletes the QTimer mid-signal.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)

    def __call__(self, delay_s: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(round(delay_s * 1000))))
        timer.timeout.connect(callback)
        timer.timeout.connect(timer.deleteLater)
        timer.start()
        return QtTimerHandle(timer)
