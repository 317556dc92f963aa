from blinker import Signal
from typing import Dict

class EventBus:
    """Named blinker signals shared by every system in the game."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that nobody else references alive.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button, press_id=int|None
EVENT_KEY_PRESS = "key_press"                      # payload: symbol, modifiers
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col


# ============================================================================
# SESSION COMMANDS
# ============================================================================
EVENT_GAME_START_REQUEST = "game_start_request"    # payload: mode=PlayMode, press_id=int|None
EVENT_RESTART_REQUEST = "restart_request"          # payload: -
EVENT_PAUSE_TOGGLE_REQUEST = "pause_toggle_request"  # payload: -
EVENT_EXIT_TO_MENU_REQUEST = "exit_to_menu_request"  # payload: -


# ============================================================================
# SESSION LIFECYCLE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode, new_mode, input_guard_press_id
EVENT_SESSION_STARTED = "session_started"          # payload: entity=int, mode=PlayMode, target=int
EVENT_SESSION_ENDED = "session_ended"              # payload: entity=int, reason=str
EVENT_STATUS_CHANGED = "status_changed"            # payload: entity=int, previous=SessionStatus, status=SessionStatus
EVENT_GAME_OVER = "game_over"                      # payload: entity=int, score=int, high_score=int, new_high_score=bool, reason=str


# ============================================================================
# SELECTION
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col, total=int
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: row, col, total=int
EVENT_SELECTION_MATCHED = "selection_matched"      # payload: positions=[(r,c),...], total=int
EVENT_SELECTION_OVERSHOOT = "selection_overshoot"  # payload: positions=[(r,c),...], total=int, target=int
EVENT_SELECTION_RESET = "selection_reset"          # payload: reason=str


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_TILES_CLEARED = "tiles_cleared"              # payload: positions=[(r,c),...], values=[int,...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove,...]
EVENT_CLEAR_RESOLVED = "clear_resolved"            # payload: entity=int, cleared=int, score=int, target=int
EVENT_ROW_INJECT_REQUEST = "row_inject_request"    # payload: reason=str
EVENT_ROW_INJECTED = "row_injected"                # payload: new_tiles=[(r,c),...], reason=str
EVENT_ROW_INJECTION_BLOCKED = "row_injection_blocked"  # payload: blocked=[(r,c),...], reason=str


# ============================================================================
# SCORE & TARGET
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"    # payload: high_score=int
EVENT_TARGET_CHANGED = "target_changed"            # payload: target=int


# ============================================================================
# TIMED MODE
# ============================================================================
EVENT_TIMER_RESET = "timer_reset"                  # payload: period=float, reason=str
EVENT_TIMER_EXPIRED = "timer_expired"              # payload: period=float


# ============================================================================
# COVER IMAGE
# ============================================================================
EVENT_COVER_IMAGE_READY = "cover_image_ready"      # payload: image=PIL.Image.Image | None
