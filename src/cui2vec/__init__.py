"""
Utilities for working with cui2vec embeddings and mapping CUIs to integers.
"""

from cui2vec.cui import cui_to_int, int_to_cui, is_cui
from cui2vec.embeddings import (
    Embeddings,
    MalformedRecordError,
    UnknownConceptError,
    load_model,
    load_model_file,
    parse_record,
)
from cui2vec.softmax import Concept, softmax
from cui2vec.vectors import cosine

__all__ = [
    "Concept",
    "Embeddings",
    "MalformedRecordError",
    "UnknownConceptError",
    "cosine",
    "cui_to_int",
    "int_to_cui",
    "is_cui",
    "load_model",
    "load_model_file",
    "parse_record",
    "softmax",
]
