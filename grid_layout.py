"""Central grid layout defaults so the entire stack stays in sync."""

DEFAULT_GRID_WIDTH = 16  # one column per LED strip
DEFAULT_GRID_HEIGHT = 16
COLUMN_CAPACITY = DEFAULT_GRID_HEIGHT  # lit positions available per column
