"""
Sequencer batch submitter package.

Encodes layer-2 transaction batches into appendSequencerBatch() calldata and
submits them to the canonical transaction chain.
"""

from .batch_encoder import BatchEncoder
from .batch_submitter import BatchSubmitter
from .config import SubmitterConfig
from .models import (
    AppendSequencerBatchParams,
    BatchContext,
    CreateEOATxData,
    EIP155TxData,
    Signature,
    TxType,
)
from .service import SequencerBatchService

__all__ = [
    "AppendSequencerBatchParams",
    "BatchContext",
    "BatchEncoder",
    "BatchSubmitter",
    "CreateEOATxData",
    "EIP155TxData",
    "SequencerBatchService",
    "Signature",
    "SubmitterConfig",
    "TxType",
]
__version__ = "0.1.0"
