"""Grid view for Q-Learning pathfinding visualization."""

from typing import Dict, Tuple
from PySide6.QtWidgets import QGraphicsView, QGraphicsScene
from PySide6.QtGui import QPainter
from PySide6.QtCore import Qt

from ..app.controller import QLearnController
from ..domain.types import NodeState, TILE_GOAL, TILE_IMPASSABLE
from .tiles import GridTile


class GridView(QGraphicsView):
    """Graphics view for displaying the grid world; clicking a cell moves the start."""

    def __init__(self, controller: QLearnController):
        super().__init__()

        self.controller = controller
        self.scene = QGraphicsScene()
        self.setScene(self.scene)

        self.tiles: Dict[Tuple[int, int], GridTile] = {}
        self.tile_size = 40.0
        self.show_q_values = True

        self.setRenderHint(QPainter.Antialiasing)

        self.controller.grid_updated.connect(self.update_grid)
        self.update_grid()

    def update_grid(self):
        """Rebuild the visual grid from the controller's environment."""
        env = self.controller.environment
        if env is None:
            return

        self.scene.clear()
        self.tiles.clear()
        self.scene.setSceneRect(0, 0, env.num_cols * self.tile_size, env.num_rows * self.tile_size)

        path_cells = set()
        if self.controller.last_path:
            path_cells = set(self.controller.last_path.coords)

        values = self.controller.max_q_by_cell()
        q_scale = float(values.max()) if values is not None else 1.0

        for row in range(env.num_rows):
            for col in range(env.num_cols):
                tile = GridTile(row, col, self.tile_size, self._cell_state(row, col, path_cells))
                tile.set_show_q_values(self.show_q_values)
                if values is not None:
                    tile.set_value(float(values[row, col]), q_scale)
                self.scene.addItem(tile)
                self.tiles[(row, col)] = tile

    def _cell_state(self, row: int, col: int, path_cells) -> NodeState:
        env = self.controller.environment
        tile = env.tiles[row, col]
        if tile == TILE_GOAL:
            return "goal"
        if (row, col) == self.controller.start:
            return "start"
        if tile == TILE_IMPASSABLE:
            return "wall"
        if (row, col) in path_cells:
            return "path"
        return "empty"

    def set_show_q_values(self, show: bool):
        self.show_q_values = show
        for tile in self.tiles.values():
            tile.set_show_q_values(show)

    def mousePressEvent(self, event):
        """Move the start cell to the clicked tile."""
        if event.button() == Qt.LeftButton:
            scene_pos = self.mapToScene(event.pos())
            col = int(scene_pos.x() // self.tile_size)
            row = int(scene_pos.y() // self.tile_size)
            self.controller.set_start((row, col))

        super().mousePressEvent(event)

    def wheelEvent(self, event):
        """Handle mouse wheel for zooming."""
        zoom_factor = 1.15
        if event.angleDelta().y() > 0:
            self.scale(zoom_factor, zoom_factor)
        else:
            self.scale(1 / zoom_factor, 1 / zoom_factor)

    def fit_in_view(self):
        """Fit the entire grid in the view."""
        if self.scene.items():
            self.fitInView(self.scene.itemsBoundingRect(), Qt.KeepAspectRatio)
