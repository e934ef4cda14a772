"""
Terminal front end for the pixel editor.
Double-buffered ANSI output, SGR mouse decoding and the interactive loop.
Each grid cell is drawn as two terminal columns.
"""

import fcntl
import logging
import os
import re
import select
import shutil
import sys
import termios
import tty
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
from rich.console import Console
from rich.panel import Panel

from .colors import to_rgb
from .config import EditorConfig
from .editor import PixelEditor, Snapshot
from .models import ChangeEvent, Color, EditorMode, Key, Point, Transformation
from .render import to_rich_text

logger = logging.getLogger(__name__)

# ANSI escape codes
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
MOUSE_ON = "\033[?1000h\033[?1003h\033[?1006h"
MOUSE_OFF = "\033[?1000l\033[?1003l\033[?1006l"

CELL_COLUMNS = 2
NO_COLOR = (-1, -1, -1)

KEY_SEQUENCES = {
    "\x1b[A": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1b[C": Key.RIGHT,
    "\x1b[D": Key.LEFT,
    "\x1b[3~": Key.DELETE,
    "\x7f": Key.DELETE,
}

TRANSFORM_KEYS = {
    "r": Transformation.rotate,
    "x": Transformation.flip_x,
    "y": Transformation.flip_y,
}

# One mouse report (possibly cut short), one CSI key sequence, or one character
INPUT_TOKEN_RE = re.compile(r"\x1b\[<[\d;]*[Mm]?|\x1b\[[\d;]*[A-Za-z~]|.", re.DOTALL)
PARTIAL_REPORT_RE = re.compile(r"\x1b\[<[\d;]*$")


@dataclass
class InputEvent:
    """A decoded key press or mouse report."""

    key: str = ""
    mouse: bool = False
    button: int = 0
    column: int = 0
    row: int = 0
    released: bool = False
    motion: bool = False


def decode_input(sequence: str) -> Optional[InputEvent]:
    """
    Decode one raw input chunk. SGR mouse reports look like
    ESC [ < button ; column ; row (M|m), with 1-based column and row.
    """
    if not sequence:
        return None
    if not sequence.startswith("\x1b[<"):
        return InputEvent(key=sequence)
    parts = sequence[3:-1].split(";")
    if len(parts) != 3 or sequence[-1] not in "Mm":
        logger.debug("Ignoring malformed mouse report %r", sequence)
        return None
    try:
        code, column, row = (int(p) for p in parts)
    except ValueError:
        logger.debug("Ignoring malformed mouse report %r", sequence)
        return None
    if code & 64:
        # Wheel
        return None
    return InputEvent(
        mouse=True,
        button=code & 3,
        column=column - 1,
        row=row - 1,
        released=sequence.endswith("m"),
        motion=bool(code & 32),
    )


def split_input(chunk: str) -> List[str]:
    """Split one raw read into separate key sequences and mouse reports."""
    return INPUT_TOKEN_RE.findall(chunk)


class TerminalRenderer:
    def __init__(self, cols: int, rows: int):
        self.cols = cols
        self.rows = rows
        shape = (rows, max(1, cols // CELL_COLUMNS))

        self.screen_buffer = np.full(shape, "  ", dtype=object)
        self.fg_buffer = np.full((*shape, 3), -1, dtype=np.int16)
        self.bg_buffer = np.full((*shape, 3), -1, dtype=np.int16)

        self._prev_screen = np.full(shape, "  ", dtype=object)
        self._prev_fg = np.full((*shape, 3), -1, dtype=np.int16)
        self._prev_bg = np.full((*shape, 3), -1, dtype=np.int16)

    def clear(self):
        self.screen_buffer.fill("  ")
        self.fg_buffer.fill(-1)
        self.bg_buffer.fill(-1)

    def set_cell(self, x: int, y: int, chars: str, fg=NO_COLOR, bg=NO_COLOR):
        if 0 <= y < self.screen_buffer.shape[0] and 0 <= x < self.screen_buffer.shape[1]:
            self.screen_buffer[y, x] = chars.ljust(CELL_COLUMNS)[:CELL_COLUMNS]
            self.fg_buffer[y, x] = fg if fg is not None else NO_COLOR
            self.bg_buffer[y, x] = bg if bg is not None else NO_COLOR

    def draw_text(self, x: int, y: int, text: str, fg=(255, 255, 255), bg=NO_COLOR):
        if len(text) % 2 != 0:
            text += " "
        for i in range(0, len(text), CELL_COLUMNS):
            self.set_cell(x + i // CELL_COLUMNS, y, text[i : i + CELL_COLUMNS], fg, bg)

    def draw_box(self, x: int, y: int, w: int, h: int, fg=(100, 100, 100)):
        for i in range(w):
            self.set_cell(x + i, y, "==", fg)
            self.set_cell(x + i, y + h - 1, "==", fg)
        for j in range(h):
            self.set_cell(x, y + j, "||", fg)
            self.set_cell(x + w - 1, y + j, "||", fg)

    def render_diff(self) -> str:
        """ANSI output for the cells that changed since the last call."""
        output_parts: List[str] = []
        last_fg = last_bg = None
        cursor = None

        h, w = self.screen_buffer.shape
        for y in range(h):
            for x in range(w):
                chars = self.screen_buffer[y, x]
                fg = tuple(self.fg_buffer[y, x])
                bg = tuple(self.bg_buffer[y, x])
                if (
                    chars == self._prev_screen[y, x]
                    and fg == tuple(self._prev_fg[y, x])
                    and bg == tuple(self._prev_bg[y, x])
                ):
                    continue

                if cursor != (x, y):
                    output_parts.append(f"\033[{y + 1};{x * CELL_COLUMNS + 1}H")
                if fg != last_fg:
                    if fg[0] == -1:
                        output_parts.append("\033[39m")
                    else:
                        output_parts.append(f"\033[38;2;{fg[0]};{fg[1]};{fg[2]}m")
                    last_fg = fg
                if bg != last_bg:
                    if bg[0] == -1:
                        output_parts.append("\033[49m")
                    else:
                        output_parts.append(f"\033[48;2;{bg[0]};{bg[1]};{bg[2]}m")
                    last_bg = bg
                output_parts.append(chars)
                cursor = (x + 1, y)

        self._prev_screen[...] = self.screen_buffer
        self._prev_fg[...] = self.fg_buffer
        self._prev_bg[...] = self.bg_buffer

        if output_parts:
            output_parts.append("\033[0m")
        return "".join(output_parts)

    def flush(self):
        out = self.render_diff()
        if out:
            sys.stdout.write(out)
            sys.stdout.flush()


class TerminalApp:
    """Interactive editor session in a raw-mode terminal."""

    # Screen cell of the top-left grid cell (inside the border)
    MAP_X = 1
    MAP_Y = 1

    def __init__(self, config: EditorConfig, cols: int = 80, rows: int = 24):
        self.config = config
        self.editor = PixelEditor(config.grid, config.color(), cell_size=(CELL_COLUMNS, 1))
        self.palette: List[Color] = config.palette_colors()
        self.renderer = TerminalRenderer(cols, rows)
        self.status_message = "d: draw  s: select  r/x/y: transform  q: quit"
        self.original_settings = None
        self.editor.subscribe(self._on_change)

    def _on_change(self, event: ChangeEvent):
        if event == ChangeEvent.MODE:
            self.status_message = f"{self.editor.mode.name} mode"

    # --- Input ----------------------------------------------------------------

    def handle_key(self, k: str) -> bool:
        """Process one key press. Returns False when the editor should exit."""
        ed = self.editor
        if k in ("q", "\x03"):
            return False
        if k in KEY_SEQUENCES:
            ed.key_down(KEY_SEQUENCES[k])
        elif k == "d":
            ed.set_mode(EditorMode.DRAW)
        elif k == "s":
            ed.set_mode(EditorMode.SELECT)
        elif k in TRANSFORM_KEYS:
            ed.apply_transform(TRANSFORM_KEYS[k]())
        elif k == "\t":
            if ed.ctrl_down:
                ed.key_up(Key.CONTROL)
            else:
                ed.key_down(Key.CONTROL)
            self.status_message = "Additive selection " + ("on" if ed.ctrl_down else "off")
        elif k == "\r":
            ed.commit_selection()
        elif len(k) == 1 and k in "HJKL":
            {
                "H": ed.extend_left,
                "J": ed.extend_bottom,
                "K": ed.extend_top,
                "L": ed.extend_right,
            }[k]()
            self.status_message = f"Grid {ed.grid.width}x{ed.grid.height}"
        elif k.isdigit() and 1 <= int(k) <= len(self.palette):
            ed.set_draw_color(self.palette[int(k) - 1])
            self.status_message = f"Color {k}"
        return True

    def handle_mouse(self, event: InputEvent):
        ed = self.editor
        pixel = Point(
            event.column - self.MAP_X * CELL_COLUMNS, event.row - self.MAP_Y
        )
        if event.released:
            ed.pointer_up(pixel, event.button)
        elif event.motion:
            ed.pointer_move(pixel)
        else:
            ed.pointer_move(pixel)
            ed.pointer_down(pixel, event.button)

    def handle_input(self, chunk: str) -> bool:
        """Dispatch every event in a raw read. Returns False on quit."""
        for sequence in split_input(chunk):
            event = decode_input(sequence)
            if event is None:
                continue
            if event.mouse:
                self.handle_mouse(event)
            elif not self.handle_key(event.key):
                return False
        return True

    # --- Output ---------------------------------------------------------------

    def draw(self, snapshot: Snapshot):
        r = self.renderer
        r.clear()
        grid = snapshot.grid
        r.draw_box(self.MAP_X - 1, self.MAP_Y - 1, grid.width + 2, grid.height + 2)

        band = snapshot.selection_rect.normalized() if snapshot.selection_rect else None
        background = self.config.background_color
        for y in range(grid.height):
            for x in range(grid.width):
                lifted = snapshot.selected[y, x]
                value = lifted if lifted is not None else snapshot.cells[y, x]
                chars = "[]" if lifted is not None else "  "
                fg = (255, 255, 255)
                if band and band.start.x <= x <= band.end.x and band.start.y <= y <= band.end.y:
                    chars = ".."
                if snapshot.pointer == Point(x, y):
                    chars = "<>"
                r.set_cell(self.MAP_X + x, self.MAP_Y + y, chars, fg, to_rgb(value, background))

        info_y = self.MAP_Y + grid.height + 2
        r.draw_text(
            0,
            info_y,
            f"{snapshot.mode.name} | start {grid.start.x},{grid.start.y} "
            f"| {grid.width}x{grid.height} | {snapshot.cursor.value}",
            (255, 255, 0),
        )
        for i, color in enumerate(self.palette):
            r.draw_text(i * 2, info_y + 1, f"{i + 1}", (150, 150, 150))
            r.set_cell(i * 2 + 1, info_y + 1, "  ", None, to_rgb(color, background))
        r.draw_text(0, info_y + 2, self.status_message, (200, 200, 200))

    def render(self):
        self.draw(self.editor.snapshot())
        self.renderer.flush()

    def setup_terminal(self):
        self.original_settings = termios.tcgetattr(sys.stdin)
        tty.setcbreak(sys.stdin)
        sys.stdout.write(HIDE_CURSOR + MOUSE_ON + "\033[2J\033[H")
        sys.stdout.flush()

    def restore_terminal(self):
        sys.stdout.write(MOUSE_OFF)
        if self.original_settings:
            termios.tcsetattr(sys.stdin, termios.TCSADRAIN, self.original_settings)
        sys.stdout.write(SHOW_CURSOR + "\033[0m\033[2J\033[H")
        sys.stdout.flush()

    def get_key(self) -> str:
        if select.select([sys.stdin], [], [], 0.02) == ([sys.stdin], [], []):
            k = sys.stdin.read(1)
            if k == "\x1b":
                flags = fcntl.fcntl(sys.stdin, fcntl.F_GETFL)
                fcntl.fcntl(sys.stdin, fcntl.F_SETFL, flags | os.O_NONBLOCK)
                try:
                    k += sys.stdin.read(16) or ""
                except (BlockingIOError, TypeError):
                    pass
                finally:
                    fcntl.fcntl(sys.stdin, fcntl.F_SETFL, flags)
            # Finish a mouse report cut off by the read size
            while PARTIAL_REPORT_RE.search(k) and select.select([sys.stdin], [], [], 0.02)[0]:
                k += sys.stdin.read(1)
            return k
        return ""

    def run(self, console: Optional[Console] = None):
        try:
            self.setup_terminal()
            while True:
                self.render()
                k = self.get_key()
                if k and not self.handle_input(k):
                    break
        except KeyboardInterrupt:
            pass
        finally:
            self.restore_terminal()

        self.editor.commit_selection()
        console = console or Console()
        console.print(
            Panel(
                to_rich_text(
                    self.editor.snapshot().cells, self.config.background_color
                ),
                title="Drawing",
                expand=False,
            )
        )


def terminal_size():
    size = shutil.get_terminal_size((80, 24))
    return size.columns, size.lines
