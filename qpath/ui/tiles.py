"""Grid tiles for Q-Learning pathfinding visualization."""

from typing import Optional
from PySide6.QtWidgets import QGraphicsRectItem, QGraphicsTextItem
from PySide6.QtGui import QBrush, QPen, QColor, QFont

from ..domain.types import NodeState


class GridTile(QGraphicsRectItem):
    """Graphics item representing a single grid cell."""

    def __init__(self, row: int, col: int, size: float, state: NodeState):
        super().__init__(0, 0, size, size)
        self.row = row
        self.col = col
        self.size = size
        self.state: NodeState = state
        self.max_q: Optional[float] = None
        self.q_scale = 1.0
        self.show_q_values = False

        # Position the tile
        self.setPos(col * size, row * size)

        self._value_text = QGraphicsTextItem(parent=self)
        self._value_text.setFont(QFont("Arial", max(int(size * 0.2), 6)))

        self.update_appearance()

    def set_state(self, state: NodeState):
        self.state = state
        self.update_appearance()

    def set_value(self, max_q: Optional[float], q_scale: float):
        """Set the cell's maximum learned value and the grid-wide maximum it is shaded against."""
        self.max_q = max_q
        self.q_scale = q_scale if q_scale > 0 else 1.0
        self.update_appearance()

    def set_show_q_values(self, show: bool):
        """Enable or disable value shading and labels."""
        self.show_q_values = show
        self.update_appearance()

    def update_appearance(self):
        """Update tile appearance based on cell state and learned value."""
        brush_color, pen_color = self._get_state_colors()
        self.setBrush(QBrush(brush_color))
        self.setPen(QPen(pen_color, 1))
        self._update_value_display()

    def _get_state_colors(self) -> tuple[QColor, QColor]:
        """Get colors for current cell state."""
        color_map = {
            "empty": (QColor(240, 240, 240), QColor(180, 180, 180)),
            "wall": (QColor(60, 60, 60), QColor(40, 40, 40)),
            "start": (QColor(100, 255, 100), QColor(50, 200, 50)),
            "goal": (QColor(255, 100, 100), QColor(200, 50, 50)),
            "path": (QColor(255, 200, 100), QColor(200, 150, 50)),
        }

        # Shade passable cells by how valuable the agent has learned them to be
        if self.state == "empty" and self.show_q_values and self.max_q:
            intensity = min(self.max_q / self.q_scale, 1.0)
            return (QColor(200, 255, 200, int(255 * intensity)), QColor(100, 200, 100))

        return color_map.get(self.state, color_map["empty"])

    def _update_value_display(self):
        if self.show_q_values and self.max_q and self.state != "wall":
            self._value_text.setPlainText(f"{self.max_q:.0f}")
            self._value_text.setDefaultTextColor(QColor(0, 110, 0))
            rect = self._value_text.boundingRect()
            self._value_text.setPos((self.size - rect.width()) / 2, (self.size - rect.height()) / 2)
            self._value_text.setVisible(True)
        else:
            self._value_text.setVisible(False)
