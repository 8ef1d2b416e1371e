"""Three-stage conversion pipeline.

extract (envelope blobs) -> decompress (zstd) -> render (Ion text), each on
its own thread, joined by two bounded ``Pipe`` handoffs. The first stage to
fail trips a shared ``CancelToken`` so its siblings stop promptly.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Dict, List, Optional

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_HANDOFF_DEPTH
from .errors import PipelineCancelled
from .format.compression import decompress
from .format.envelope import extract
from .format.text import render
from .streaming import CancelToken, Pipe, PipeReader, PipeWriter

logger = logging.getLogger(__name__)

__all__ = ["StageState", "StageOutcome", "PipelineResult", "Pipeline"]


class StageState(enum.Enum):
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class StageOutcome:
    """Final state of one stage."""

    name: str
    state: StageState = StageState.RUNNING
    result: Any = None
    error: Optional[BaseException] = None


@dataclass
class PipelineResult:
    """Summary of a successful run.

    Attributes:
        blobs: Number of envelope blobs extracted
        compressed_bytes: Bytes handed from extract to decompress
        decompressed_bytes: Bytes handed from decompress to render
        values: Number of Ion values rendered
        stages: Outcome of every stage by name
    """

    blobs: int
    compressed_bytes: int
    decompressed_bytes: int
    values: int
    stages: Dict[str, StageOutcome] = field(default_factory=dict)


@dataclass
class _Stage:
    name: str
    run: Callable[[], Any]
    input: Optional[PipeReader] = None
    output: Optional[PipeWriter] = None


class Pipeline:
    """Convert an Ion binary envelope stream into Ion text.

    Parameters:
        source: The payload region, prefixed with the Ion version marker
        sink: Binary sink for the rendered text
        chunk_size: Read size used by every stage
        handoff_depth: Chunks each handoff may hold before writers block
        indent: Pretty-print indentation for the rendered text

    Example:
        >>> with BVMReader(payload) as source:
        ...     result = Pipeline(source, sys.stdout.buffer).run()
    """

    def __init__(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        handoff_depth: int = DEFAULT_HANDOFF_DEPTH,
        indent: Optional[str] = None,
    ) -> None:
        self.source = source
        self.sink = sink
        self.chunk_size = chunk_size
        self.handoff_depth = handoff_depth
        self.indent = indent
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _stages(self, compressed: Pipe, decompressed: Pipe) -> List[_Stage]:
        return [
            _Stage(
                "extract",
                lambda: extract(self.source, compressed.writer, self.chunk_size),
                output=compressed.writer,
            ),
            _Stage(
                "decompress",
                lambda: decompress(
                    compressed.reader, decompressed.writer, self.chunk_size
                ),
                input=compressed.reader,
                output=decompressed.writer,
            ),
            _Stage(
                "render",
                lambda: render(
                    decompressed.reader, self.sink, self.indent, self.chunk_size
                ),
                input=decompressed.reader,
            ),
        ]

    def _run_stage(
        self, stage: _Stage, outcome: StageOutcome, token: CancelToken
    ) -> None:
        self._logger.debug("Stage %s started", stage.name)
        try:
            outcome.result = stage.run()
        except Exception as e:
            outcome.state = StageState.FAILED
            outcome.error = e
            if isinstance(e, PipelineCancelled):
                self._logger.debug("Stage %s cancelled", stage.name)
            elif token.cancel(e):
                self._logger.warning("Stage %s failed: %s", stage.name, e)
            if stage.output is not None:
                stage.output.close(error=e)
        else:
            outcome.state = StageState.SUCCEEDED
            self._logger.debug("Stage %s finished: %r", stage.name, outcome.result)
            if stage.output is not None:
                stage.output.close()
        finally:
            if stage.input is not None:
                stage.input.close()

    def run(self) -> PipelineResult:
        """Run all stages to completion.

        Returns:
            Counts gathered from the stages

        Raises:
            IonZstError: The first error raised by any stage
        """
        token = CancelToken()
        compressed = Pipe(self.handoff_depth, token, name="compressed")
        decompressed = Pipe(self.handoff_depth, token, name="decompressed")
        stages = self._stages(compressed, decompressed)
        outcomes = {stage.name: StageOutcome(stage.name) for stage in stages}

        with ThreadPoolExecutor(
            max_workers=len(stages), thread_name_prefix="ionzst-stage"
        ) as executor:
            futures = [
                executor.submit(self._run_stage, stage, outcomes[stage.name], token)
                for stage in stages
            ]
            wait(futures)
        # _run_stage never raises; surface bugs in it anyway
        for future in futures:
            future.result()

        if token.reason is not None:
            raise token.reason

        return PipelineResult(
            blobs=outcomes["extract"].result,
            compressed_bytes=compressed.writer.bytes_written,
            decompressed_bytes=decompressed.writer.bytes_written,
            values=outcomes["render"].result,
            stages=outcomes,
        )
