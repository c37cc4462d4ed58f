"""
===============================================================================
EnvelopePipeline – cover page + header/footer for an existing PDF
-------------------------------------------------------------------------------
Stages
    INIT             check input/output, decide in-place mode
    COVER_GENERATED  render cover page into a temp PDF
    MERGED           cover page + all source pages -> output
    OVERLAID         header/footer (+ annotation filter) -> temp, replace output
    COMMITTED        in-place mode: output replaces the input file
Any failure ends in FAILED. The input file is never modified before the
final os.replace().
===============================================================================
"""
from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from pypdf import PdfWriter

from core.logging.logic.logger import RunLog

from ..exceptions.errors import CommitError, EnvelopeError, PreconditionError, StageError
from ..models.envelope_enums import PipelineState
from ..models.envelope_settings import EnvelopeSettings
from ..models.pipeline_result import PipelineResult
from .cover_page_builder import CoverPageBuilder
from .file_ops import RetryPolicy, delete_quietly, open_for_write, replace_file, temp_path_for
from .header_footer_overlay import HeaderFooterOverlay
from .pdf_primitives import compress_and_write, merge_pages, open_reader, page_count, page_geometry

logger = logging.getLogger(__name__)

FEATURE_ID = "pdf_envelope"


class EnvelopePipeline:
    """Runs the stages strictly one after another. One instance per run."""

    def __init__(self, settings: EnvelopeSettings, *,
                 retry: RetryPolicy = RetryPolicy(),
                 compress: bool = True,
                 run_log: Optional[RunLog] = None,
                 now: Optional[datetime] = None) -> None:
        self._settings = settings
        self._retry = retry
        self._compress = compress
        self._run_log = run_log
        self._now = now
        self.run_id = uuid.uuid4().hex
        self.state = PipelineState.INIT

    # ------------------------------------------------------------------ #
    #  Public API                                                        #
    # ------------------------------------------------------------------ #
    def run(self, input_path: Path, output_path: Optional[Path] = None, *,
            overwrite: bool = False) -> PipelineResult:
        """
        Raises PreconditionError, StageError or CommitError; self.state is
        FAILED afterwards.
        """
        self._event("run_started", f"input={input_path} output={output_path} overwrite={overwrite}")
        try:
            source, target, in_place = self._prepare(Path(input_path), output_path, overwrite)
            logger.info("Processing file: %s...", source)

            cover_path = self._generate_cover(source, target)
            self._merge(source, cover_path, target)
            pages = self._overlay(target)

            final_path = target
            if in_place:
                self._commit_in_place(target, source)
                final_path = source
            self._transition(PipelineState.COMMITTED)
        except EnvelopeError as ex:
            self.state = PipelineState.FAILED
            self._event("run_failed", str(ex), level="ERROR")
            raise

        self._event("run_committed", str(final_path))
        return PipelineResult(
            run_id=self.run_id,
            state=self.state,
            output_path=final_path,
            page_count=pages,
            in_place=in_place,
            message=f"{source} modified in place" if in_place else None,
        )

    # ------------------------------------------------------------------ #
    #  INIT                                                              #
    # ------------------------------------------------------------------ #
    def _prepare(self, source: Path, output_path: Optional[Path],
                 overwrite: bool) -> Tuple[Path, Path, bool]:
        if not source.is_file():
            raise PreconditionError(f"Input file does not exist: {source}")
        if not os.access(source, os.R_OK):
            raise PreconditionError(f"Input file is not readable: {source}")
        source = source.resolve()

        if output_path is not None and Path(output_path).resolve() == source:
            output_path = None

        if output_path is None:
            # No output file means the input file shall be modified in-place
            if not overwrite:
                raise PreconditionError(
                    "In order to modify the input file in-place use option --overwrite-yes."
                )
            return source, temp_path_for(source, "output"), True

        target = Path(output_path).resolve()
        if target.exists():
            # Avoid overwriting an existing output file without declared intent
            if not overwrite:
                raise PreconditionError(f"Output file exists. Use option --overwrite-yes. ({target})")
            try:
                target.unlink()
            except OSError as ex:
                raise PreconditionError(
                    "Output file exists and cannot be overwritten. "
                    f"Ensure it is not opened in another application. ({ex})"
                ) from ex
        return source, target, False

    # ------------------------------------------------------------------ #
    #  COVER_GENERATED                                                   #
    # ------------------------------------------------------------------ #
    def _generate_cover(self, source: Path, target: Path) -> Path:
        cover_path = temp_path_for(target, "cover")
        builder = CoverPageBuilder(
            self._settings.cover_page,
            page_number_offset=self._settings.page_number_offset,
            now=self._now,
        )
        try:
            reader = open_reader(source)
            if page_count(reader) == 0:
                raise ValueError("input document has no pages")
            geometry = page_geometry(reader.pages[0])
            with open_for_write(cover_path, self._retry) as fh:
                builder.build(geometry, fh)
        except Exception as ex:
            delete_quietly(cover_path, "Temporary cover page file")
            raise StageError("cover", f"Cover page could not be generated: {ex}") from ex
        self._transition(PipelineState.COVER_GENERATED)
        return cover_path

    # ------------------------------------------------------------------ #
    #  MERGED                                                            #
    # ------------------------------------------------------------------ #
    def _merge(self, source: Path, cover_path: Path, target: Path) -> None:
        try:
            writer = PdfWriter()
            merge_pages(writer, open_reader(cover_path), [0])
            merge_pages(writer, open_reader(source))
            with open_for_write(target, self._retry) as fh:
                writer.write(fh)
        except Exception as ex:
            delete_quietly(target, "Partial output file")
            raise StageError("merge", f"Cover page could not be added: {ex}") from ex
        finally:
            if not delete_quietly(cover_path, "Temporary cover page file"):
                logger.info("Continuing...")
        self._transition(PipelineState.MERGED)

    # ------------------------------------------------------------------ #
    #  OVERLAID                                                          #
    # ------------------------------------------------------------------ #
    def _overlay(self, target: Path) -> int:
        temp_path = temp_path_for(target, "overlay")
        s = self._settings
        overlay = HeaderFooterOverlay(
            s.page_header,
            s.page_footer,
            page_number_offset=s.page_number_offset,
            remove_annotations_other_than_links=s.remove_annotations_other_than_links,
            now=self._now,
        )
        try:
            writer = PdfWriter(clone_from=open_reader(target))
            pages = overlay.apply(writer)
            with open_for_write(temp_path, self._retry) as fh:
                compress_and_write(writer, fh, compress=self._compress)
            replace_file(temp_path, target)
        except Exception as ex:
            delete_quietly(temp_path)
            raise StageError("overlay", f"Header and footer could not be added: {ex}",
                             kept_path=target) from ex
        self._transition(PipelineState.OVERLAID)
        return pages

    # ------------------------------------------------------------------ #
    #  COMMITTED                                                         #
    # ------------------------------------------------------------------ #
    def _commit_in_place(self, built: Path, source: Path) -> None:
        try:
            replace_file(built, source)
        except OSError as ex:
            raise CommitError(
                built,
                f"The changes could not be applied to the input file ({ex}). "
                f"Input file is unmodified, keeping temporary file: {built}",
            ) from ex

    # ------------------------------------------------------------------ #
    #  Helpers                                                           #
    # ------------------------------------------------------------------ #
    def _transition(self, state: PipelineState) -> None:
        self.state = state
        logger.debug("Stage reached: %s", state.value)
        self._event(f"stage_{state.value}")

    def _event(self, event: str, message: Optional[str] = None, *, level: str = "INFO") -> None:
        if self._run_log is None:
            return
        try:
            self._run_log.log(FEATURE_ID, event, level=level,
                              reference_id=self.run_id, message=message)
        except Exception as ex:  # run log must never fail a run
            logger.warning("Run log entry '%s' could not be written: %s", event, ex)
