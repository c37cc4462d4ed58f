from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .envelope_enums import PipelineState


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one EnvelopePipeline.run()."""
    run_id: str
    state: PipelineState
    output_path: Optional[Path]
    page_count: int = 0
    in_place: bool = False
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == PipelineState.COMMITTED
