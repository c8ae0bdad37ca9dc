import logging
from contextlib import ExitStack
from typing import Dict, List, Optional, Sequence

from .collaborators import DictLocaleProvider, GridSelectionSource, LocaleProvider
from .highlight import ColorPalette, on_sheet
from ..domain.models import DialogRangeRow, Highlight, RangeDescriptor, SelectionEvent
from ..refs.codec import RangeTokenCodec
from ..refs.normalizer import normalize
from ..refs.tokenizer import sequence_to_text, tokenize
from ..refs.validator import SequenceValidator

logger = logging.getLogger(__name__)

LABEL_KEYS = {
    "title": "rangeSelector.title",
    "placeholder": "rangeSelector.placeHolder",
    "add": "rangeSelector.addAnotherRange",
    "tooltip": "rangeSelector.buttonTooltip",
    "confirm": "rangeSelector.confirm",
    "cancel": "rangeSelector.cancel",
}


class MultiRangeDialogController:
    """
    an editable list of range rows, one highlight color per row.

    at least one row always exists. under only_one_range there is exactly one
    and add/remove do nothing. nothing here touches the owning input's state:
    confirm() hands back the validated descriptors and the caller commits them.
    """

    def __init__(
        self,
        grid: GridSelectionSource,
        init_value: Sequence[RangeDescriptor],
        palette: ColorPalette,
        unit_id: str = "",
        sub_unit_id: str = "",
        only_one_range: bool = False,
        across_sheet: bool = False,
        locale: Optional[LocaleProvider] = None,
        codec: Optional[RangeTokenCodec] = None,
    ):
        self.grid = grid
        self.palette = palette
        self.unit_id = unit_id
        self.sub_unit_id = sub_unit_id
        self.active_sheet = sub_unit_id
        self.only_one_range = only_one_range
        self.across_sheet = across_sheet
        self.locale = locale or DictLocaleProvider()
        self.codec = codec or RangeTokenCodec()
        self.validator = SequenceValidator(self.codec)
        self.is_open = False
        self._resources = ExitStack()

        seed = list(init_value[:1]) if only_one_range else list(init_value)
        texts = [t for t in self.codec.encode(seed, across_sheet) if t] or [""]
        self._rows = [DialogRangeRow(text=t) for t in texts]
        self._recolor()
        self.focus_index = len(self._rows) - 1

    @property
    def rows(self) -> List[DialogRangeRow]:
        return [row.model_copy() for row in self._rows]

    @property
    def texts(self) -> List[str]:
        return [row.text for row in self._rows]

    def open(self):
        """start listening to grid selection and draw the rows."""
        if self.is_open:
            return
        self.is_open = True
        self.grid.set_only_one_range(self.only_one_range)
        subscription = self.grid.subscribe_selection(self.unit_id, self.sub_unit_id, self.handle_selection)
        self._resources.callback(subscription.dispose)
        self._resources.callback(self.grid.clear_highlights)
        self._refresh()

    def close(self):
        self.is_open = False
        self._resources.close()

    def labels(self) -> Dict[str, str]:
        return {name: self.locale.t(key) for name, key in LABEL_KEYS.items()}

    def focus_row(self, index: int) -> bool:
        if not 0 <= index < len(self._rows):
            return False
        self.focus_index = index
        self._refresh()
        return True

    def add_row(self) -> bool:
        if self.only_one_range:
            return False
        self._rows.append(DialogRangeRow())
        self._recolor()
        self.focus_index = len(self._rows) - 1
        self._refresh()
        return True

    def remove_row(self, index: int) -> bool:
        if self.only_one_range or len(self._rows) <= 1:
            return False
        if not 0 <= index < len(self._rows):
            return False
        del self._rows[index]
        self._recolor()
        if index < self.focus_index or self.focus_index >= len(self._rows):
            self.focus_index = max(self.focus_index - 1, 0)
        self._refresh()
        return True

    def set_row_text(self, index: int, text: str) -> bool:
        if not 0 <= index < len(self._rows):
            return False
        self._rows[index] = self._rows[index].model_copy(update={"text": text})
        self._refresh()
        return True

    def replace(self, text: str) -> bool:
        """set the text of the focused row."""
        if self.focus_index < 0:
            return False
        return self.set_row_text(self.focus_index, text)

    def handle_selection(self, event: SelectionEvent):
        """the range being drawn on the grid goes into the focused row."""
        if not self.is_open or self.focus_index < 0:
            return
        nodes = tokenize(event.text)
        if nodes is None:
            logger.debug(f"ignoring unlexable selection text {event.text!r}")
            return
        segments = [sequence_to_text(s) for s in self.validator.split_ranges(nodes) if s]
        self.replace(segments[-1] if segments else "")

    def handle_sheet_switch(self, sheet_name: str):
        self.active_sheet = sheet_name
        if self.is_open:
            self._refresh()

    def highlights(self) -> List[Highlight]:
        """one highlight per row holding a pure range on the active sheet. empty rows draw nothing."""
        result = []
        for row in self._rows:
            if not row.text:
                continue
            d = self._row_descriptor(row.text)
            if d is None or not on_sheet(d, self.active_sheet, self.sub_unit_id):
                continue
            result.append(Highlight(descriptor=d, color=self.palette.colors[row.color_index]))
        return result

    def confirm(self) -> List[RangeDescriptor]:
        """the normalized descriptors of every row that holds a pure range; other rows are dropped."""
        result = []
        for row in self._rows:
            d = self._row_descriptor(row.text)
            if d is None:
                logger.debug(f"dropping invalid dialog row {row.text!r}")
                continue
            result.append(d)
        self.close()
        return result

    def cancel(self):
        self._rows = []
        self.focus_index = -1
        self.close()

    def _row_descriptor(self, text: str) -> Optional[RangeDescriptor]:
        nodes = tokenize(text)
        if not self.validator.is_pure_range(nodes):
            return None
        return normalize(self.codec.decode(nodes[0].token))

    def _recolor(self):
        self._rows = [
            row.model_copy(update={"color_index": self.palette.index_for(i)})
            for i, row in enumerate(self._rows)
        ]

    def _refresh(self):
        if not self.is_open:
            return
        focused = self._rows[self.focus_index] if 0 <= self.focus_index < len(self._rows) else None
        self.grid.set_skip_last_enabled(focused is not None and not focused.text)
        self.grid.set_highlights(self.highlights())
