from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from ..domain.models import Highlight, SelectionEvent, TextRun

# command id that closes every open cell editor; treated as an unconditional blur
CLOSE_ALL_EDITORS = "sheet.operation.set-cell-edit-visible"

class Disposable(ABC):
    @abstractmethod
    def dispose(self):
        pass

class CallbackDisposable(Disposable):
    """runs a function once on dispose."""
    def __init__(self, callback: Callable[[], None]):
        self._callback: Optional[Callable[[], None]] = callback

    def dispose(self):
        callback, self._callback = self._callback, None
        if callback:
            callback()

class TextEditorSurface(ABC):
    """the rich-text input the range text is typed into."""

    @abstractmethod
    def subscribe_input(self, handler: Callable[[str, Optional[int]], None]) -> Disposable:
        """call handler(text, caret_offset) whenever the body changes."""
        pass

    @abstractmethod
    def set_text(self, text: str):
        pass

    @abstractmethod
    def set_caret(self, start: int, end: int):
        pass

    @abstractmethod
    def focus(self):
        pass

    @abstractmethod
    def blur(self):
        pass

    @abstractmethod
    def set_text_runs(self, runs: List[TextRun]):
        """color spans of the editor text."""
        pass

class GridSelectionSource(ABC):
    """the sheet grid: selection gestures in, highlight overlays out."""

    @abstractmethod
    def subscribe_selection(self, unit_id: str, sub_unit_id: str, handler: Callable[[SelectionEvent], None]) -> Disposable:
        pass

    @abstractmethod
    def subscribe_sheet_switch(self, handler: Callable[[str], None]) -> Disposable:
        """call handler(sheet_name) when the active sheet changes."""
        pass

    @abstractmethod
    def set_highlights(self, highlights: List[Highlight]):
        pass

    @abstractmethod
    def clear_highlights(self):
        pass

    @abstractmethod
    def set_skip_last_enabled(self, enabled: bool):
        """while enabled the overlay does not draw the last (in-progress) range."""
        pass

    @abstractmethod
    def set_only_one_range(self, enabled: bool):
        pass

    @abstractmethod
    def reset_selection(self):
        """drop any in-progress selection without committing it."""
        pass

class CommandBus(ABC):
    @abstractmethod
    def on_command_executed(self, handler: Callable[[str], None]) -> Disposable:
        """call handler(command_id) after each command runs."""
        pass

class LocaleProvider(ABC):
    @abstractmethod
    def t(self, key: str) -> str:
        pass

class DictLocaleProvider(LocaleProvider):
    """looks keys up in a dict, falling back to the key itself."""

    DEFAULTS = {
        "rangeSelector.title": "Select a data range",
        "rangeSelector.placeHolder": "Select range or enter",
        "rangeSelector.addAnotherRange": "Add range",
        "rangeSelector.buttonTooltip": "Select data range",
        "rangeSelector.confirm": "Confirm",
        "rangeSelector.cancel": "Cancel",
    }

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self.messages = dict(self.DEFAULTS)
        if messages:
            self.messages.update(messages)

    def t(self, key: str) -> str:
        return self.messages.get(key, key)
