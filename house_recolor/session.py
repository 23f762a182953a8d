"""Interactive editing session: selection state, debounced previews, final render.

Preview requests carry a monotonically increasing sequence number. Only
the latest request is ever rendered after the debounce period, and a
result is accepted only when its sequence number is the newest one
issued, so a slow stale preview can never overwrite a newer one.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Set

import numpy as np

from house_recolor.errors import RenderInProgressError
from house_recolor.masks import apply_selection, combine_masks
from house_recolor.transform import ColorTransformEngine
from house_recolor.types import (
    BACKGROUND_ID,
    ClassificationResult,
    ColorChangeOptions,
    ManualSelection,
    PixelBuffer,
    ProcessingResult,
    get_class,
)

if TYPE_CHECKING:
    from house_recolor.pipeline import HouseRecolorPipeline

logger = logging.getLogger(__name__)


@dataclass
class PreviewUpdate:
    """Accepted preview result and the request it answers."""

    seq: int
    result: ProcessingResult


@dataclass
class _PendingPreview:
    seq: int
    submitted_at: float
    original: PixelBuffer
    mask: np.ndarray
    options: ColorChangeOptions


class PreviewScheduler:
    """Trailing-edge debounce with sequence-number cancellation."""

    def __init__(
        self,
        engine: ColorTransformEngine,
        debounce_seconds: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self._issued = 0
        self._pending: Optional[_PendingPreview] = None
        self.latest: Optional[PreviewUpdate] = None

    @property
    def latest_seq(self) -> int:
        return self._issued

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def submit(self, original: PixelBuffer, mask: np.ndarray, options: ColorChangeOptions) -> int:
        """Register a preview request, superseding any pending one."""

        self._issued += 1
        if self._pending is not None:
            logger.debug("Preview %d superseded by %d", self._pending.seq, self._issued)
        self._pending = _PendingPreview(
            seq=self._issued,
            submitted_at=self.clock(),
            original=original,
            mask=np.array(mask, copy=True),
            options=options,
        )
        return self._issued

    def is_current(self, seq: int) -> bool:
        return seq == self._issued

    def deliver(self, seq: int, result: ProcessingResult) -> bool:
        """Accept ``result`` only if it answers the newest request."""

        if not self.is_current(seq):
            logger.debug("Discarding stale preview %d (latest is %d)", seq, self._issued)
            return False
        self.latest = PreviewUpdate(seq=seq, result=result)
        return True

    def poll(self) -> Optional[PreviewUpdate]:
        """Render the pending request once the debounce period has passed.

        Returns:
            The accepted update, or None when nothing was due.
        """

        pending = self._pending
        if pending is None or self.clock() - pending.submitted_at < self.debounce_seconds:
            return None
        self._pending = None
        result = self.engine.create_preview(pending.original, pending.mask, pending.options)
        if self.deliver(pending.seq, result):
            return self.latest
        return None

    def cancel(self) -> None:
        """Drop the pending request and invalidate any result in flight."""

        self._pending = None
        self._issued += 1


class RecolorSession:
    """State of one photo being edited.

    The original pixels are kept as an immutable snapshot; classification,
    selection and manual strokes can be rebuilt or retried at any time
    without reloading the image.
    """

    def __init__(self, pipeline: "HouseRecolorPipeline", pixels: PixelBuffer) -> None:
        self.pipeline = pipeline
        self.original = pixels
        self.classification: Optional[ClassificationResult] = None
        self.selected_ids: Set[int] = set()
        self.manual_selections: List[ManualSelection] = []
        self.previews = PreviewScheduler(
            pipeline.engine,
            debounce_seconds=pipeline.config.session.debounce_seconds,
        )
        self._final_lock = threading.Lock()
        self.final: Optional[ProcessingResult] = None

    # ---- classification and selection ---------------------------------
    def segment(self) -> ClassificationResult:
        """Classify the original; a new result clears the class selection."""

        self.classification = self.pipeline.segment(self.original)
        self.selected_ids.clear()
        return self.classification

    def select(self, class_id: int) -> None:
        get_class(class_id)
        if class_id == BACKGROUND_ID:
            raise ValueError("Background (class 0) cannot be selected.")
        self.selected_ids.add(int(class_id))

    def deselect(self, class_id: int) -> None:
        self.selected_ids.discard(int(class_id))

    def toggle(self, class_id: int) -> bool:
        """Flip the selection of ``class_id``; returns the new state."""

        if class_id in self.selected_ids:
            self.deselect(class_id)
            return False
        self.select(class_id)
        return True

    def clear_selection(self) -> None:
        self.selected_ids.clear()
        self.manual_selections.clear()

    def add_manual_selection(self, selection: ManualSelection) -> None:
        self.manual_selections.append(selection)

    def combined_mask(self) -> np.ndarray:
        """Label map of the selected classes with manual strokes applied on top."""

        if self.classification is not None:
            mask = combine_masks(self.classification, sorted(self.selected_ids))
        else:
            mask = np.zeros(self.original.shape, dtype=np.uint8)
        for selection in self.manual_selections:
            mask = apply_selection(mask, selection)
        return mask

    # ---- rendering -------------------------------------------------------
    def request_preview(self, options: ColorChangeOptions) -> int:
        return self.previews.submit(self.original, self.combined_mask(), options)

    def poll_preview(self) -> Optional[PreviewUpdate]:
        return self.previews.poll()

    @property
    def rendering(self) -> bool:
        return self._final_lock.locked()

    def render_final(self, options: ColorChangeOptions) -> ProcessingResult:
        """Full-resolution render; a second concurrent call is rejected."""

        if not self._final_lock.acquire(blocking=False):
            raise RenderInProgressError("A final render is already running for this session.")
        try:
            self.final = self.pipeline.render(self.original, self.combined_mask(), options)
            return self.final
        finally:
            self._final_lock.release()

    def reset(self) -> None:
        """Forget classification, selection and results; keep the original."""

        self.classification = None
        self.clear_selection()
        self.previews.cancel()
        self.previews.latest = None
        self.final = None
