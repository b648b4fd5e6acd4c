from __future__ import annotations

from typing import Callable, List, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QResizeEvent
from PySide6.QtWidgets import QHBoxLayout, QVBoxLayout, QWidget

from app.masonrygrid.layout.state import LayoutState


class MasonryContainer(QWidget):
    """Hosts item widgets in N vertical columns.

    The container doesn't decide anything: a LayoutController hands it a
    LayoutState via apply_layout(), and it reports its width through subscribe().
    """

    widthChanged = Signal(float)

    def __init__(
        self,
        *,
        column_class: str = "",
        spacing: int = 8,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._column_class = column_class
        self._spacing = spacing
        self._columns: List[QWidget] = []

        self._row = QHBoxLayout(self)
        self._row.setContentsMargins(0, 0, 0, 0)
        self._row.setSpacing(spacing)
        self._row.setAlignment(Qt.AlignmentFlag.AlignTop)

    @property
    def column_widgets(self) -> List[QWidget]:
        return list(self._columns)

    def subscribe(self, callback: Callable[[float], None]) -> Callable[[], None]:
        self.widthChanged.connect(callback)

        def unsubscribe() -> None:
            self.widthChanged.disconnect(callback)

        return unsubscribe

    def resizeEvent(self, event: QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        # Height-only changes can't move a breakpoint.
        if event.size().width() != event.oldSize().width():
            self.widthChanged.emit(float(event.size().width()))

    def column_height(self, items: Sequence[QWidget]) -> float:
        """Live height of a column holding ``items``."""

        if not items:
            return 0.0
        heights = sum(_effective_height(w) for w in items)
        return float(heights + self._spacing * (len(items) - 1))

    def _make_column(self) -> QWidget:
        column = QWidget(self)
        if self._column_class:
            column.setProperty("class", self._column_class)
        column.setProperty("masonryColumn", True)
        layout = QVBoxLayout(column)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(self._spacing)
        return column

    def _clear_column(self, column: QWidget) -> None:
        layout = column.layout()
        while layout.count():
            # takeAt leaves the widget alive; the next addWidget re-parents it.
            layout.takeAt(0)

    def apply_layout(self, state: LayoutState) -> None:
        self.setProperty("initialized", False)
        for column in self._columns:
            self._clear_column(column)

        # Same column count: reuse the column widgets.
        stale: List[QWidget] = []
        if len(self._columns) != state.column_count:
            stale, self._columns = self._columns, [self._make_column() for _ in range(state.column_count)]
            for column in self._columns:
                self._row.addWidget(column, 1)

        for column, items in zip(self._columns, state.columns):
            layout = column.layout()
            for widget in items:
                layout.addWidget(widget)
            layout.addStretch(1)

        for column in stale:
            self._row.removeWidget(column)
            column.deleteLater()
        self.setProperty("initialized", True)


def _effective_height(widget: QWidget) -> int:
    # sizeHint ignores fixed/min/max constraints; the layout doesn't.
    return widget.sizeHint().expandedTo(widget.minimumSize()).boundedTo(widget.maximumSize()).height()
