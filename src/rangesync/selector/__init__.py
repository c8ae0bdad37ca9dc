"""selection synchronizer: keeps range input text and grid selection in step."""
from .collaborators import (
    CLOSE_ALL_EDITORS,
    CallbackDisposable,
    CommandBus,
    DictLocaleProvider,
    Disposable,
    GridSelectionSource,
    LocaleProvider,
    TextEditorSurface,
)
from .dialog import MultiRangeDialogController
from .engine import FocusArbiter, SelectionSyncEngine, SyncState, clean_input
from .events import DeferredTask, EventQueue, ManualClock, Throttle
from .highlight import ColorPalette, build_highlights
from .state import RangeSelectorState

__all__ = [
    "CLOSE_ALL_EDITORS",
    "CallbackDisposable",
    "CommandBus",
    "DictLocaleProvider",
    "Disposable",
    "GridSelectionSource",
    "LocaleProvider",
    "TextEditorSurface",
    "MultiRangeDialogController",
    "FocusArbiter",
    "SelectionSyncEngine",
    "SyncState",
    "clean_input",
    "DeferredTask",
    "EventQueue",
    "ManualClock",
    "Throttle",
    "ColorPalette",
    "build_highlights",
    "RangeSelectorState",
]
