"""shared fakes for the selector collaborators."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rangesync.config import SyncSettings
from rangesync.selector.collaborators import (
    CallbackDisposable,
    CommandBus,
    GridSelectionSource,
    TextEditorSurface,
)
from rangesync.selector.events import EventQueue, ManualClock


class FakeEditor(TextEditorSurface):
    """records every command and lets tests type into it."""

    def __init__(self):
        self.handlers = []
        self.text = ""
        self.set_text_calls = []
        self.caret = None
        self.focus_count = 0
        self.blur_count = 0
        self.runs = []

    def subscribe_input(self, handler):
        self.handlers.append(handler)
        return CallbackDisposable(lambda: self.handlers.remove(handler))

    def type(self, text, caret=None):
        self.text = text
        for handler in list(self.handlers):
            handler(text, caret)

    def set_text(self, text):
        self.text = text
        self.set_text_calls.append(text)

    def set_caret(self, start, end):
        self.caret = (start, end)

    def focus(self):
        self.focus_count += 1

    def blur(self):
        self.blur_count += 1

    def set_text_runs(self, runs):
        self.runs = list(runs)


class FakeGrid(GridSelectionSource):
    """a grid whose selection stream and sheet switches are driven by the test."""

    def __init__(self):
        self.selection_handlers = []
        self.sheet_handlers = []
        self.highlights = []
        self.clear_count = 0
        self.skip_last = False
        self.only_one = False
        self.reset_count = 0

    def subscribe_selection(self, unit_id, sub_unit_id, handler):
        entry = (unit_id, sub_unit_id, handler)
        self.selection_handlers.append(entry)
        return CallbackDisposable(lambda: self.selection_handlers.remove(entry))

    def subscribe_sheet_switch(self, handler):
        self.sheet_handlers.append(handler)
        return CallbackDisposable(lambda: self.sheet_handlers.remove(handler))

    def select(self, event):
        for _, _, handler in list(self.selection_handlers):
            handler(event)

    def switch_sheet(self, sheet_name):
        for handler in list(self.sheet_handlers):
            handler(sheet_name)

    def set_highlights(self, highlights):
        self.highlights = list(highlights)

    def clear_highlights(self):
        self.highlights = []
        self.clear_count += 1

    def set_skip_last_enabled(self, enabled):
        self.skip_last = enabled

    def set_only_one_range(self, enabled):
        self.only_one = enabled

    def reset_selection(self):
        self.reset_count += 1


class FakeCommandBus(CommandBus):
    def __init__(self):
        self.handlers = []

    def on_command_executed(self, handler):
        self.handlers.append(handler)
        return CallbackDisposable(lambda: self.handlers.remove(handler))

    def execute(self, command_id):
        for handler in list(self.handlers):
            handler(command_id)


@pytest.fixture
def editor():
    return FakeEditor()


@pytest.fixture
def grid():
    return FakeGrid()


@pytest.fixture
def commands():
    return FakeCommandBus()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def queue(clock):
    return EventQueue(clock)


@pytest.fixture
def settings():
    """default timings: 30ms focus, 50ms caret, 100ms input throttle."""
    return SyncSettings(palette=["#111111", "#222222", "#333333"])
