from typing import List, Optional, Sequence, Union

from ..domain.models import RangeDescriptor
from ..refs.codec import RangeTokenCodec
from ..refs.normalizer import apply_sheet_policy, normalize
from ..refs.tokenizer import NodeSequence, ReferenceNode, tokenize


class RangeSelectorState:
    """
    the canonical text of one range input and what is derived from it.

    text is the single source of truth: nodes and descriptors are recomputed
    from it on every accepted change and never edited on their own.
    """

    def __init__(
        self,
        init_value: Union[str, Sequence[RangeDescriptor]] = "",
        only_one_range: bool = False,
        across_sheet: bool = False,
        codec: Optional[RangeTokenCodec] = None,
    ):
        self.codec = codec or RangeTokenCodec()
        self.only_one_range = only_one_range
        self.across_sheet = across_sheet
        self.focused = False
        self.dialog_visible = False
        self._text = ""
        self._nodes: NodeSequence = ()
        self._descriptors: List[RangeDescriptor] = []

        if isinstance(init_value, str):
            self.set_text(init_value)
        else:
            self.set_text(self.codec.join(init_value, across_sheet))

    @property
    def text(self) -> str:
        return self._text

    @property
    def nodes(self) -> NodeSequence:
        return self._nodes

    @property
    def descriptors(self) -> List[RangeDescriptor]:
        return list(self._descriptors)

    @property
    def needs_sync(self) -> bool:
        """grid selection drives this input only while focused with the dialog closed."""
        return self.focused and not self.dialog_visible

    def set_text(self, text: str) -> bool:
        """
        accept new canonical text and rederive nodes and descriptors.

        unlexable text is discarded to the empty state. returns whether the text lexed.
        """
        nodes = tokenize(text)
        if nodes is None:
            self._text = ""
            self._nodes = ()
            self._descriptors = []
            return False

        self._text = text
        self._nodes = nodes
        decoded = [self.codec.decode(n.token) for n in nodes if isinstance(n, ReferenceNode)]
        self._descriptors = [
            apply_sheet_policy(normalize(d), self.across_sheet) for d in decoded if not d.is_degenerate
        ]
        return True
