"""snippet-lid: programming-language identification for code snippets.

Public API is intentionally small. `classify_text` / `classify_buffer` cover most uses; use
`LanguageClassifier` with an explicit `LanguageModel` for scores, event hooks or custom assets.
"""

from .classifier import (
    ClassificationResult,
    LanguageClassifier,
    classify_buffer,
    classify_text,
)
from .config import ClassifierConfig
from .errors import (
    EmptyInputError,
    InvalidConfigError,
    MalformedModelError,
    SnippetLidError,
    UnknownLabelError,
)
from .forest import InternalNode, LeafNode, VoteTally, aggregate_votes, evaluate_tree
from .labels import LabelTable
from .model import LanguageModel, default_model, load_model, parse_model
from .tokens import tokenize
from .vectorize import FrequencyVector, frequency_vector
from .vocabulary import Vocabulary

__all__ = [
    "classify_text",
    "classify_buffer",
    "LanguageClassifier",
    "ClassificationResult",
    "ClassifierConfig",
    "LanguageModel",
    "default_model",
    "load_model",
    "parse_model",
    "tokenize",
    "Vocabulary",
    "FrequencyVector",
    "frequency_vector",
    "InternalNode",
    "LeafNode",
    "VoteTally",
    "evaluate_tree",
    "aggregate_votes",
    "LabelTable",
    "SnippetLidError",
    "EmptyInputError",
    "MalformedModelError",
    "UnknownLabelError",
    "InvalidConfigError",
]

__version__ = "0.1.0"
