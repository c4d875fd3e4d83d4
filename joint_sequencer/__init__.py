"""
Joint Sequencer: pivot-anchored alignment of joint length datasets.
"""

import logging

from .api import calculate_matches, align_request
from .sequencer import JointLengthSequencer
from .request import AlignmentRequest, sample_request
from .models import (
    Joint,
    JointMatchResult,
    NormalizedSequence,
    SequencingResult,
    Cell,
    Move,
    SequencingError,
    InvalidInputError,
    MissingFieldError,
    InvalidValueError,
    UnsupportedConfigurationError,
    AlignmentCancelledError,
)
from . import core
from .core import FieldAccessor, normalize_dataset
from .output import OutputFormatter

__version__ = "0.1.0"
__all__ = [
    "calculate_matches",
    "align_request",
    "JointLengthSequencer",
    "AlignmentRequest",
    "sample_request",
    "Joint",
    "JointMatchResult",
    "NormalizedSequence",
    "SequencingResult",
    "Cell",
    "Move",
    "SequencingError",
    "InvalidInputError",
    "MissingFieldError",
    "InvalidValueError",
    "UnsupportedConfigurationError",
    "AlignmentCancelledError",
    "FieldAccessor",
    "normalize_dataset",
    "OutputFormatter",
    "core",
]

# Configure default logging format to be minimal
_handler = logging.StreamHandler()
_handler.setFormatter(logging.Formatter("%(message)s"))
_logger = logging.getLogger("joint_sequencer")
_logger.addHandler(_handler)
_logger.setLevel(logging.INFO)
