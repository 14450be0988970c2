"""
Batch sources for the submission service.

A batch provider is an async callable returning the next batch to submit,
or None when there is nothing to do, plus an acknowledgement hook called
once the batch has been submitted.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from .models import AppendSequencerBatchParams

logger = logging.getLogger(__name__)


class BatchProvider(Protocol):
    async def next_batch(self) -> Optional[AppendSequencerBatchParams]: ...

    async def mark_submitted(self, batch: AppendSequencerBatchParams) -> None: ...


class SpoolBatchProvider:
    """
    Reads batches from JSON files in a spool directory.

    Each *.json file holds one AppendSequencerBatchParams.to_dict() object.
    Files are served in name order; a served file is renamed to *.submitted
    once mark_submitted() is called for it.
    """

    SUBMITTED_SUFFIX = ".submitted"

    def __init__(self, spool_dir: str):
        self.spool_dir = Path(spool_dir)
        self._pending: Optional[tuple[Path, AppendSequencerBatchParams]] = None

    async def next_batch(self) -> Optional[AppendSequencerBatchParams]:
        """
        Load the oldest unsubmitted batch file.

        Returns:
            The batch, or None if the spool is empty

        Raises:
            ValueError: If a batch file is not valid JSON
            KeyError: If a batch file lacks a required field
        """
        if self._pending is not None:
            return self._pending[1]

        if not self.spool_dir.is_dir():
            logger.debug(f"Spool directory {self.spool_dir} does not exist yet")
            return None

        files = sorted(self.spool_dir.glob("*.json"))
        if not files:
            return None

        path = files[0]
        with path.open() as file:
            batch = AppendSequencerBatchParams.from_dict(json.load(file))

        logger.info(f"Loaded {batch} from {path.name}")
        self._pending = (path, batch)
        return batch

    async def mark_submitted(self, batch: AppendSequencerBatchParams) -> None:
        """Rename the file the batch came from so it is not served again."""
        if self._pending is None or self._pending[1] is not batch:
            logger.warning("mark_submitted called for a batch that was not served")
            return

        path = self._pending[0]
        path.rename(path.with_name(path.name + self.SUBMITTED_SUFFIX))
        self._pending = None
