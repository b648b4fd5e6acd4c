from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import (
    QApplication,
    QFrame,
    QLabel,
    QMainWindow,
    QScrollArea,
    QWidget,
)

from app.masonrygrid.layout.controller import LayoutController
from app.masonrygrid.layout.options import MasonryConfig
from native.masonrygrid_app.container import MasonryContainer
from native.masonrygrid_app.qt_scheduler import QtScheduler

# Host attributes the demo grid is configured from.
DEMO_ATTRIBUTES = {
    "data-breakpoint-cols": '{"500": 1, "800": 2, "1100": 3, "default": 4}',
    "data-column-class": "masonry-column",
    "data-masonry-sort-by-height": "true",
    "data-masonry-debug": "false",
}

CARD_HEIGHTS = (120, 220, 160, 300, 180, 260, 140)


def make_card(index: int, parent: QWidget | None = None) -> QLabel:
    card = QLabel(f"Card {index + 1}", parent)
    card.setFrameShape(QFrame.Shape.StyledPanel)
    card.setFixedHeight(CARD_HEIGHTS[index % len(CARD_HEIGHTS)])
    card.setStyleSheet("background: #2b2f36; color: #e8e8e8; border-radius: 6px; padding: 8px;")
    return card


class MainWindow(QMainWindow):
    def __init__(self, card_count: int = 30) -> None:
        super().__init__()
        self.setWindowTitle("Masonry Grid")
        self.resize(1000, 700)

        config = MasonryConfig.from_attributes(DEMO_ATTRIBUTES)
        self.grid = MasonryContainer(column_class=config.column_class)
        cards = [make_card(i, self.grid) for i in range(card_count)]

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(self.grid)
        self.setCentralWidget(scroll)

        self.controller = LayoutController(
            cards,
            config,
            self.grid.apply_layout,
            schedule=QtScheduler(self),
            column_height=self.grid.column_height,
        )
        self.controller.start(self.grid.width())
        self.controller.attach(self.grid.subscribe)

    def closeEvent(self, event) -> None:
        self.controller.close()
        super().closeEvent(event)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    app = QApplication(sys.argv)
    app.setApplicationName("MasonryGrid")

    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
