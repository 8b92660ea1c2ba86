"""Interactive full-screen view built on Rich Live.

Layout: Sidebar (one row per task) | Log panel (selected task) / Footer.

The sidebar shows a status glyph and the command of every task, the log
panel renders the selected task's log with its ANSI colors, and the footer
lists key bindings plus the visible line range. Scrolling is local to this
view: each task keeps its own scroll state, pinned to the end until the
operator scrolls up.
"""

from dataclasses import dataclass
from typing import Optional

from rich.ansi import AnsiDecoder
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..formatters import SymbolsFormatter
from .adapter import StatusGlyph, UIAdapter
from .keys import DISABLE_MOUSE, ENABLE_MOUSE, IS_WINDOWS, KeyReader


@dataclass
class ScrollState:
    """Scroll state for one task's log."""
    offset: int = 0
    total_lines: int = 0
    at_end: bool = True  # Auto-scroll when at end


class InteractiveUI(UIAdapter):
    """Sidebar + log pane view with keyboard and mouse wheel navigation."""

    FOOTER_KEYS = "j/k/Arrows select | PgUp/PgDn g/G scroll | m mouse | q quit"
    SIDEBAR_WIDTH = 24
    WHEEL_STEP = 3

    def __init__(
        self,
        no_color: bool = False,
        console: Optional[Console] = None,
        key_reader: Optional[KeyReader] = None,
        mouse_capture: bool = True,
    ):
        super().__init__()
        self.no_color = no_color
        self.console = console or Console(force_terminal=True, no_color=no_color)
        self.symbols = SymbolsFormatter(no_color=no_color)
        self.key_reader = key_reader or KeyReader()
        self.mouse_capture = mouse_capture and not IS_WINDOWS

        self.titles: list[str] = []
        self.glyphs: list[StatusGlyph] = []
        self.selected_index = 0

        self._lines: list[Text] = []
        self._scroll_states: dict[int, ScrollState] = {}

        self.live: Optional[Live] = None
        self._dirty = True

    @property
    def interactive(self) -> bool:
        return True

    # =========================================================================
    # UIAdapter Interface Implementation
    # =========================================================================

    def start(self, titles: list[str]) -> None:
        """Enter the alternate screen and start reading keys."""
        self.titles = list(titles)
        self.glyphs = [StatusGlyph(self.symbols.Pending, "cyan") for _ in self.titles]

        self.live = Live(
            self._build_renderable(),
            console=self.console,
            screen=True,
            auto_refresh=False,
            transient=False,
            redirect_stdout=False,
            redirect_stderr=False,
        )
        self.live.start()
        self.key_reader.setup()
        if self.mouse_capture:
            self._write_control(ENABLE_MOUSE)
        self._dirty = False

    def stop(self) -> None:
        """Leave the alternate screen and restore the terminal."""
        if self.mouse_capture:
            self._write_control(DISABLE_MOUSE)
        self.key_reader.restore()
        if self.live:
            self.live.stop()
            self.live = None

    def poll_input(self, timeout: float) -> None:
        for key in self.key_reader.read_keys(timeout):
            self.handle_key(key)

    def set_selection(self, index: int) -> None:
        self.selected_index = index
        self._dirty = True

    def render_log(self, content: str) -> None:
        """Decode the selected task's full log and keep its scroll position."""
        self._lines = list(AnsiDecoder().decode(content))
        for line in self._lines:
            line.no_wrap = True
            line.overflow = "crop"
        self._update_scroll_state(self.selected_index, len(self._lines), self._get_log_height())
        self._dirty = True

    def update_status(self, index: int, glyph: StatusGlyph) -> None:
        self.glyphs[index] = glyph
        self._dirty = True

    def refresh(self) -> None:
        if self._dirty and self.live:
            self.live.update(self._build_renderable(), refresh=True)
        self._dirty = False

    def toggle_mouse_capture(self) -> None:
        if IS_WINDOWS:
            return
        self.mouse_capture = not self.mouse_capture
        self._write_control(ENABLE_MOUSE if self.mouse_capture else DISABLE_MOUSE)
        self._dirty = True

    def _write_control(self, sequence: str) -> None:
        self.console.file.write(sequence)
        self.console.file.flush()

    # =========================================================================
    # Key Handling
    # =========================================================================

    def handle_key(self, key: str) -> None:
        """Dispatch to a registered handler, or scroll the log pane."""
        if self.dispatch_key(key):
            self._dirty = True
            return
        self._scroll(key)

    def _get_scroll_state(self, index: int) -> ScrollState:
        if index not in self._scroll_states:
            self._scroll_states[index] = ScrollState()
        return self._scroll_states[index]

    def _update_scroll_state(self, index: int, total_lines: int, visible_height: int) -> ScrollState:
        """Update scroll state with new content info, handling auto-scroll."""
        state = self._get_scroll_state(index)
        prev_total = state.total_lines
        state.total_lines = total_lines

        max_offset = max(0, total_lines - visible_height)

        if state.at_end and total_lines >= prev_total:
            state.offset = max_offset

        state.offset = max(0, min(state.offset, max_offset))
        state.at_end = state.offset >= max_offset
        return state

    def _scroll(self, key: str) -> None:
        state = self._get_scroll_state(self.selected_index)
        visible_height = self._get_log_height()
        max_offset = max(0, state.total_lines - visible_height)

        if key == "wheel_up":
            state.offset = max(0, state.offset - self.WHEEL_STEP)
        elif key == "wheel_down":
            state.offset = min(max_offset, state.offset + self.WHEEL_STEP)
        elif key == "page_up":
            state.offset = max(0, state.offset - visible_height)
        elif key == "page_down":
            state.offset = min(max_offset, state.offset + visible_height)
        elif key == "top":
            state.offset = 0
        elif key == "bottom":
            state.offset = max_offset
        else:
            return

        state.at_end = state.offset >= max_offset
        self._dirty = True

    # =========================================================================
    # Renderers
    # =========================================================================

    def _get_log_height(self) -> int:
        """Rows available for log lines (minus panel borders and footer)."""
        return max(1, self.console.size.height - 3)

    def _build_sidebar(self) -> Table:
        height = max(1, self.console.size.height - 1)
        count = len(self.titles)
        start = 0
        if count > height:
            start = min(max(0, self.selected_index - height // 2), count - height)

        table = Table.grid(expand=True)
        table.add_column(no_wrap=True, overflow="ellipsis")
        selected_style = "" if self.no_color else "on blue"

        for index in range(start, min(count, start + height)):
            glyph = self.glyphs[index]
            row = Text(no_wrap=True, overflow="ellipsis")
            row.append(glyph.text, style="" if self.no_color else glyph.style)
            row.append(f" {self.titles[index]}")
            if index == self.selected_index:
                if self.no_color:
                    row = Text(f"{self.symbols.Selection}", no_wrap=True, overflow="ellipsis") + row
                table.add_row(row, style=selected_style)
            else:
                table.add_row(row)
        return table

    def _build_log_panel(self) -> Panel:
        state = self._get_scroll_state(self.selected_index)
        visible_height = self._get_log_height()
        visible = self._lines[state.offset:state.offset + visible_height]
        title = self.titles[self.selected_index] if self.titles else ""
        return Panel(
            Group(*visible) if visible else Text(""),
            title=Text(title, style="" if self.no_color else "bold"),
            title_align="left",
            border_style="" if self.no_color else "blue",
        )

    def _build_footer(self) -> Text:
        dim_style = "" if self.no_color else "dim"
        cyan_style = "" if self.no_color else "cyan"

        state = self._get_scroll_state(self.selected_index)
        total = state.total_lines
        if total == 0:
            line_info = "0 lines"
        else:
            end_line = min(state.offset + self._get_log_height(), total)
            line_info = f"{state.offset + 1}-{end_line}/{total}"

        separator = f" {self.symbols.Separator} "
        footer = Text(no_wrap=True, overflow="ellipsis")
        footer.append(self.FOOTER_KEYS, style=dim_style)
        footer.append(separator, style=dim_style)
        footer.append(f"mouse {'on' if self.mouse_capture else 'off'}", style=dim_style)
        footer.append(separator, style=dim_style)
        footer.append(line_info, style=cyan_style)
        return footer

    def _build_renderable(self) -> Layout:
        """Build the complete screen layout."""
        layout = Layout()
        layout.split_column(
            Layout(name="body", ratio=1),
            Layout(self._build_footer(), name="footer", size=1),
        )
        layout["body"].split_row(
            Layout(self._build_sidebar(), name="sidebar", size=self.SIDEBAR_WIDTH),
            Layout(self._build_log_panel(), name="log", ratio=1),
        )
        return layout
