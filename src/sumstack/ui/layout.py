from sumstack.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    GRID_COLS,
    GRID_ROWS,
    HEADER_HEIGHT,
)

def compute_board_geometry(window_width: int, window_height: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Return (tile_size, start_x, start_y) for a board sitting above the bottom margin.

    Shared by rendering and input mapping so clicks land on the drawn cells.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = min(
        (window_height - BOTTOM_MARGIN) * BOARD_MAX_HEIGHT_PCT,
        window_height - BOTTOM_MARGIN - HEADER_HEIGHT,
    )
    tile_by_w = max_board_w / cols
    tile_by_h = max_board_h / rows
    tile_size = int(min(tile_by_w, tile_by_h))
    if tile_size < 20:
        tile_size = 20
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(x: float, y: float, window_width: int, window_height: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    """Map a window point to (row, col) or None. Row 0 is drawn at the top."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    if x < start_x or x >= start_x + cols * tile_size:
        return None
    if y < start_y or y >= start_y + rows * tile_size:
        return None
    col = int((x - start_x) // tile_size)
    row_from_bottom = int((y - start_y) // tile_size)
    row = rows - 1 - row_from_bottom
    if 0 <= row < rows and 0 <= col < cols:
        return row, col
    return None


def cell_center(row: int, col: int, window_width: int, window_height: int, rows: int = GRID_ROWS, cols: int = GRID_COLS):
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, rows, cols)
    cx = start_x + col * tile_size + tile_size / 2
    cy = start_y + (rows - 1 - row) * tile_size + tile_size / 2
    return cx, cy
