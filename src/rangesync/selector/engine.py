"""keeps a range input's text and the grid selection in sync."""

import logging
import re
from contextlib import ExitStack, contextmanager
from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

from .collaborators import CLOSE_ALL_EDITORS, CommandBus, GridSelectionSource, LocaleProvider, TextEditorSurface
from .dialog import MultiRangeDialogController
from .events import DeferredTask, EventQueue, Throttle
from .highlight import ColorPalette, build_highlights
from .state import RangeSelectorState
from ..config import SyncSettings, load_settings
from ..domain.models import RangeDescriptor, SelectionEvent
from ..refs.codec import RangeTokenCodec
from ..refs.normalizer import apply_sheet_policy, canonicalize
from ..refs.validator import SequenceValidator

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    IDLE = "idle"
    EDITING_TEXT = "editing_text"
    DRAGGING_SELECTION = "dragging_selection"
    SUSPENDED_FOR_DIALOG = "suspended_for_dialog"


def clean_input(text: str) -> str:
    """strip line breaks, collapse repeated commas and drop a leading comma."""
    text = re.sub(r"[\r\n]", "", text)
    text = re.sub(r",{2,}", ",", text)
    return re.sub(r"^,", "", text)


def _noop(*args):
    pass


class FocusArbiter:
    """
    hands the grid overlay and selection stream to one engine at a time.
    acquiring blurs whoever held them before.
    """

    def __init__(self):
        self.holder: Optional["SelectionSyncEngine"] = None

    def acquire(self, engine: "SelectionSyncEngine"):
        previous, self.holder = self.holder, engine
        if previous is not None and previous is not engine:
            logger.debug("focus taken over, blurring previous range input")
            previous.blur()

    def release(self, engine: "SelectionSyncEngine"):
        if self.holder is engine:
            self.holder = None


class SelectionSyncEngine:
    """
    the state machine behind one range input.

    a reaction flows one way only. text input recomputes descriptors and
    highlights but never writes the editor; a grid selection serializes to
    canonical text, writes it to the editor and reparses it. every collaborator
    callback is funneled through the event queue, so handlers run to completion
    one at a time.

    args:
        editor: the text surface the ranges are typed into
        grid: selection source and highlight overlay
        commands: notifies when commands run elsewhere
        queue: the event queue all handlers and deferred work run on
        init_value: initial text or descriptors
        unit_id: workbook the input belongs to
        sub_unit_id: sheet the input belongs to; unqualified ranges live here
        only_one_range: accept at most one range
        across_sheet: keep sheet and unit qualifiers; when False they are dropped
    """

    def __init__(
        self,
        editor: TextEditorSurface,
        grid: GridSelectionSource,
        commands: CommandBus,
        queue: EventQueue,
        init_value: Union[str, Sequence[RangeDescriptor]] = "",
        unit_id: str = "",
        sub_unit_id: str = "",
        only_one_range: bool = False,
        across_sheet: bool = False,
        autofocus: bool = False,
        error_text: Optional[str] = None,
        settings: Optional[SyncSettings] = None,
        locale: Optional[LocaleProvider] = None,
        arbiter: Optional[FocusArbiter] = None,
        on_change: Callable[[str], None] = _noop,
        on_verify: Callable[[bool, str], None] = _noop,
        on_dialog_visibility_change: Callable[[bool], None] = _noop,
        on_focus: Callable[[], None] = _noop,
        on_blur: Callable[[], None] = _noop,
    ):
        self.editor = editor
        self.grid = grid
        self.commands = commands
        self.queue = queue
        self.unit_id = unit_id
        self.sub_unit_id = sub_unit_id
        self.active_sheet = sub_unit_id
        self.error_text = error_text
        self.settings = settings or load_settings()
        self.palette = ColorPalette(self.settings.palette)
        self.locale = locale
        self.arbiter = arbiter or FocusArbiter()
        self.codec = RangeTokenCodec()
        self.validator = SequenceValidator(self.codec)
        self.state = RangeSelectorState(init_value, only_one_range, across_sheet, self.codec)

        self.on_change = on_change
        self.on_verify = on_verify
        self.on_dialog_visibility_change = on_dialog_visibility_change
        self.on_focus = on_focus
        self.on_blur = on_blur

        self.phase = SyncState.IDLE
        self.dialog: Optional[MultiRangeDialogController] = None
        self._disposed = False
        self._emit_pending = False
        self._deferred: List[DeferredTask] = []
        self._sync: Optional[ExitStack] = None
        self._input = Throttle(queue, self.settings.input_throttle, self._apply_text_input)

        # lifetime subscriptions, closed on dispose
        with ExitStack() as stack:
            stack.callback(editor.subscribe_input(self._on_editor_input).dispose)
            stack.callback(commands.on_command_executed(self._on_command).dispose)
            stack.callback(grid.subscribe_sheet_switch(self._on_sheet_switch).dispose)
            self._subscriptions = stack.pop_all()

        if autofocus:
            self.request_focus()

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def descriptors(self) -> List[RangeDescriptor]:
        return self.state.descriptors

    @property
    def only_one_range(self) -> bool:
        return self.state.only_one_range

    @property
    def across_sheet(self) -> bool:
        return self.state.across_sheet

    @property
    def syncing(self) -> bool:
        return self._sync is not None

    # focus

    def request_focus(self):
        """focus the input after the focus delay, once the previous surface has blurred."""
        self._defer(self.settings.focus_delay, self._focus_now, True)

    def blur(self):
        """lose focus at once, dropping any in-progress selection."""
        if self._disposed:
            return
        self._cancel_deferred()
        was_focused = self.state.focused
        if self.syncing:
            self.grid.reset_selection()
        self._leave_sync()
        self.state.focused = False
        self.editor.blur()
        self._set_phase(SyncState.IDLE)
        if was_focused:
            self.on_blur()

    def _focus_now(self, notify: bool):
        if notify:
            self.on_focus()
        self.editor.focus()
        self.state.focused = True
        self._set_phase(SyncState.IDLE)
        self._enter_sync()
        self._highlight()

    def _enter_sync(self):
        if self.syncing or not self.state.needs_sync:
            return
        with ExitStack() as stack:
            stack.enter_context(self._highlight_claim())
            self.grid.set_only_one_range(self.state.only_one_range)
            subscription = self.grid.subscribe_selection(self.unit_id, self.sub_unit_id, self._on_selection)
            stack.callback(subscription.dispose)
            self._sync = stack.pop_all()

    def _leave_sync(self):
        sync, self._sync = self._sync, None
        if sync is not None:
            sync.close()

    @contextmanager
    def _highlight_claim(self):
        self.arbiter.acquire(self)
        try:
            yield
        finally:
            self.grid.clear_highlights()
            self.arbiter.release(self)

    # collaborator callbacks, queued

    def _on_editor_input(self, text: str, caret_offset: Optional[int] = None):
        self.queue.post(self._input, text)

    def _on_selection(self, event: SelectionEvent):
        self.queue.post(self._apply_selection, event)

    def _on_sheet_switch(self, sheet_name: str):
        self.queue.post(self._apply_sheet_switch, sheet_name)

    def _on_command(self, command_id: str):
        if command_id == CLOSE_ALL_EDITORS:
            self.queue.post(self._close_all)

    # handlers

    def _apply_text_input(self, raw: str):
        if self._disposed:
            return
        if not self.state.needs_sync or self.phase == SyncState.SUSPENDED_FOR_DIALOG:
            logger.debug("ignoring text input while not focused")
            return
        text = clean_input(raw)
        if text == self.state.text:
            # echo of text we wrote, or no change
            return

        self._set_phase(SyncState.EDITING_TEXT)
        self.state.set_text(text)
        self._highlight()
        self._verify()
        self._request_emit()

    def _apply_selection(self, event: SelectionEvent):
        if self._disposed or not self.state.needs_sync or self.phase == SyncState.SUSPENDED_FOR_DIALOG:
            return
        self._set_phase(SyncState.DRAGGING_SELECTION)

        text = canonicalize(event.text, self.state.across_sheet, self.codec) or ""
        self.state.set_text(text)
        self.editor.set_text(self.state.text)
        self._highlight()
        self._verify()
        self._request_emit()

        if event.is_end:
            self._set_phase(SyncState.IDLE)
            self.editor.focus()
            if event.caret_offset >= 0:
                caret = min(event.caret_offset, len(self.state.text))
                self._defer(self.settings.caret_delay, self.editor.set_caret, caret, caret)

    def _apply_sheet_switch(self, sheet_name: str):
        if self._disposed:
            return
        self.active_sheet = sheet_name
        if self.dialog is not None:
            self.dialog.handle_sheet_switch(sheet_name)
        if not self.state.needs_sync:
            return

        if not self.state.across_sheet and sheet_name != self.sub_unit_id:
            # a selection there would be attributed to the wrong sheet
            logger.debug(f"sheet switched to {sheet_name!r} without across-sheet support, blurring")
            self.blur()
            return
        self._highlight()

    def _close_all(self):
        if self._disposed:
            return
        if self.dialog is not None:
            self.dialog.cancel()
            self.dialog = None
        if self.state.dialog_visible:
            self.state.dialog_visible = False
            self.on_dialog_visibility_change(False)
        self.blur()

    # dialog

    def open_dialog(self) -> bool:
        """suspend inline syncing and open the multi-range dialog after the focus delay."""
        if self._disposed or self.error_text is not None:
            return False
        if self.phase == SyncState.SUSPENDED_FOR_DIALOG or self.dialog is not None or self.state.dialog_visible:
            return False
        self._cancel_deferred()
        self.editor.focus()
        self._leave_sync()
        self._set_phase(SyncState.SUSPENDED_FOR_DIALOG)
        self._defer(self.settings.focus_delay, self._show_dialog)
        return True

    def _show_dialog(self):
        self.state.dialog_visible = True
        self.state.focused = False
        self.dialog = MultiRangeDialogController(
            self.grid,
            self.state.descriptors,
            self.palette,
            unit_id=self.unit_id,
            sub_unit_id=self.sub_unit_id,
            only_one_range=self.state.only_one_range,
            across_sheet=self.state.across_sheet,
            locale=self.locale,
            codec=self.codec,
        )
        self.dialog.active_sheet = self.active_sheet
        self.dialog.open()
        self.on_dialog_visibility_change(True)

    def confirm_dialog(self) -> bool:
        """commit the dialog's valid rows as the new text."""
        if self.dialog is None:
            return False
        ranges = [apply_sheet_policy(d, self.state.across_sheet) for d in self.dialog.confirm()]
        self.dialog = None
        text = self.codec.join(ranges, self.state.across_sheet)
        self.state.set_text(text)
        self._verify()
        self.editor.set_text(self.state.text)
        self._hide_dialog()
        self._request_emit()
        self._defer(self.settings.focus_delay, self._return_from_dialog, len(self.state.text))
        return True

    def cancel_dialog(self) -> bool:
        """close the dialog; nothing it edited is kept."""
        if self.dialog is None:
            return False
        self.dialog.cancel()
        self.dialog = None
        self._hide_dialog()
        self._defer(self.settings.focus_delay, self._return_from_dialog, None)
        return True

    def _hide_dialog(self):
        self.state.dialog_visible = False
        self._set_phase(SyncState.IDLE)
        self.on_dialog_visibility_change(False)

    def _return_from_dialog(self, caret: Optional[int]):
        self.state.focused = True
        self._enter_sync()
        if caret is not None:
            self.editor.set_caret(caret, caret)
        self.editor.focus()
        self._highlight()

    # output

    def _highlight(self):
        if not self.syncing:
            return
        highlights, runs = build_highlights(
            self.state.nodes, self.palette, self.codec, self.active_sheet, self.sub_unit_id
        )
        self.grid.set_highlights(highlights)
        self.editor.set_text_runs(runs)

    def _verify(self):
        passed = self.validator.is_range_list(self.state.nodes, self.state.only_one_range)
        self.on_verify(passed, self.state.text)

    def _request_emit(self):
        # emission runs as its own queued event, after the recompute finished
        if not self._emit_pending:
            self._emit_pending = True
            self.queue.post(self._emit_change)

    def _emit_change(self):
        self._emit_pending = False
        if self._disposed:
            return
        if not self.validator.is_range_list(self.state.nodes, self.state.only_one_range):
            return
        text = canonicalize(self.state.text, self.state.across_sheet, self.codec)
        if text is not None:
            self.on_change(text)

    # lifecycle

    def _defer(self, delay: float, callback: Callable, *args) -> DeferredTask:
        self._deferred = [t for t in self._deferred if t.pending]
        task = self.queue.call_later(delay, callback, *args)
        self._deferred.append(task)
        return task

    def _cancel_deferred(self):
        for task in self._deferred:
            task.cancel()
        self._deferred = []

    def _set_phase(self, phase: SyncState):
        if phase != self.phase:
            logger.debug(f"range input {self.unit_id}/{self.sub_unit_id}: {self.phase.value} -> {phase.value}")
            self.phase = phase

    def dispose(self):
        """tear down: cancel deferred work and release every subscription."""
        if self._disposed:
            return
        self._disposed = True
        self._cancel_deferred()
        self._input.cancel()
        if self.dialog is not None:
            self.dialog.close()
            self.dialog = None
        self._leave_sync()
        self._subscriptions.close()
