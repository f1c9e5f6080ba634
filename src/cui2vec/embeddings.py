"""
cui2vec embeddings: concurrent model loading and similarity ranking.

The pre-trained model from:
    https://arxiv.org/pdf/1804.01486.pdf
downloaded from:
    https://figshare.com/s/00d69861786cd0156d81
is a CSV file with one concept per line: the CUI followed by its features.

Loading:
    Lines are parsed by a pool of worker threads fed from a bounded queue; all
    inserts into the shared dict happen under a single lock. The Embeddings
    object is only built once every line has been read and every worker has
    finished, so a store can never be queried while it is still loading.

Querying:
    Embeddings.similar() scores every other concept against the target with
    cosine similarity on a bounded worker pool, softmaxes the scores and sorts
    them in descending order.

Usage:
    from cui2vec import load_model_file

    model = load_model_file("cui2vec_pretrained.csv", skip_first=True)
    for concept in model.similar("C0000005", top_k=10):
        print(concept.cui, concept.value)
"""

from __future__ import annotations

import csv
import logging
import os
import threading
import time
from collections.abc import Iterable, Iterator, Mapping
from functools import cached_property
from typing import TYPE_CHECKING, Any

import numpy as np
from tqdm import tqdm

from cui2vec.config import DEFAULT_LOAD_WORKERS, DEFAULT_QUERY_WORKERS, QUEUE_FACTOR, resolve_workers
from cui2vec.parallel import fan_out
from cui2vec.softmax import Concept, softmax
from cui2vec.vectors import cosine

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

logger = logging.getLogger(__name__)

# Longest slice of a raw line quoted in error messages.
MAX_QUOTED_LINE = 80


# =============================================================================
# Errors
# =============================================================================


class MalformedRecordError(ValueError):
    """A model line could not be parsed; the whole load is aborted."""

    def __init__(self, message: str, *, line: str, line_number: int, field: str | None = None):
        quoted = line if len(line) <= MAX_QUOTED_LINE else line[:MAX_QUOTED_LINE] + "..."
        super().__init__(f"line {line_number}: {message}: {quoted!r}")
        self.line = line
        self.line_number = line_number
        self.field = field


class UnknownConceptError(KeyError):
    """The requested CUI is not in the model."""

    def __init__(self, cui: str):
        super().__init__(cui)
        self.cui = cui

    def __str__(self) -> str:
        return f"{self.cui} is not in the model"


# =============================================================================
# Embeddings
# =============================================================================


def _frozen(vector: ArrayLike) -> NDArray[np.float64]:
    array = np.asarray(vector, dtype=np.float64)
    if array.flags.writeable:
        array = array.copy()
        array.flags.writeable = False
    return array


class Embeddings(Mapping[str, "NDArray[np.float64]"]):
    """
    A complete cui2vec model loaded into memory.

    Read-only mapping of CUI -> float64 feature vector. Any number of threads
    may query the same instance concurrently.

    Args:
        vectors (Mapping[str, ArrayLike]): Feature vector for each CUI.
    """

    def __init__(self, vectors: Mapping[str, ArrayLike]):
        self._vectors: dict[str, NDArray[np.float64]] = {
            cui: _frozen(vector) for cui, vector in vectors.items()
        }

    def __getitem__(self, cui: str) -> NDArray[np.float64]:
        return self._vectors[cui]

    def __len__(self) -> int:
        return len(self._vectors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._vectors)

    def __repr__(self) -> str:
        return f"Embeddings(concepts={len(self)}, dimension={self.dimension})"

    @cached_property
    def dimension(self) -> int:
        """Length of the first stored vector (0 for an empty model)."""
        for vector in self._vectors.values():
            return int(vector.shape[0])
        return 0

    @cached_property
    def ids(self) -> list[str]:
        return sorted(self._vectors)

    def vector(self, cui: str) -> NDArray[np.float64]:
        try:
            return self._vectors[cui]
        except KeyError:
            raise UnknownConceptError(cui) from None

    def similarity(self, a: str, b: str) -> float:
        """Raw cosine similarity between two CUIs in the model."""
        return cosine(self.vector(a), self.vector(b))

    def similar(
        self,
        cui: str,
        *,
        top_k: int | None = None,
        num_workers: int | None = None,
        strict: bool = True,
    ) -> list[Concept]:
        """
        Rank every other CUI by similarity to ``cui``.

        Cosine similarity is computed against every concept in the model on a
        bounded pool of workers. Pairs whose vectors differ in dimension, have
        zero magnitude or give a non-finite score are left out. The remaining scores are softmaxed
        and sorted by descending value, ties broken by CUI.

        Args:
            cui: Target CUI; never part of the result
            top_k: Keep only the first top_k concepts (None for all)
            num_workers: Concurrent comparisons (default CUI2VEC_QUERY_WORKERS)
            strict: Raise UnknownConceptError for an unknown target. When
                False the target is treated as an empty vector, which matches
                nothing, so the result is empty.

        Returns:
            Concepts sorted by descending softmax probability
        """
        if cui in self._vectors:
            target = self._vectors[cui]
        elif strict:
            raise UnknownConceptError(cui)
        else:
            logger.warning("%s is not in the model; ranking against an empty vector", cui)
            target = np.empty(0, dtype=np.float64)

        workers = resolve_workers(num_workers, DEFAULT_QUERY_WORKERS)
        scored: list[Concept] = []
        scored_lock = threading.Lock()

        def compare(entry: tuple[str, NDArray[np.float64]]) -> None:
            other, vector = entry
            if other == cui or not other:
                return
            try:
                value = cosine(target, vector)
            except ValueError as exc:
                logger.debug("Skipping %s: %s", other, exc)
                return
            with scored_lock:
                scored.append(Concept(cui=other, value=value))

        fan_out(self._vectors.items(), compare, workers)

        # Completion order is arbitrary; fix it before summing in softmax.
        scored.sort(key=lambda concept: concept.cui)
        ranked = sorted(softmax(scored), key=lambda concept: -concept.value)
        if top_k is not None:
            ranked = ranked[: max(top_k, 0)]
        return ranked


# =============================================================================
# Loading
# =============================================================================


def parse_record(line: str, line_number: int = 1) -> tuple[str, NDArray[np.float64]] | None:
    """
    Parse one model line into (cui, vector).

    Returns None for empty lines. Raises MalformedRecordError when the line is
    not valid CSV or a feature is not a number.
    """
    line = line.rstrip("\r\n")
    if not line:
        return None

    try:
        fields = next(csv.reader([line], strict=True), [])
    except csv.Error as exc:
        raise MalformedRecordError(f"invalid CSV ({exc})", line=line, line_number=line_number) from exc
    if not fields:
        return None

    cui = fields[0]
    vector = np.empty(len(fields) - 1, dtype=np.float64)
    for i, field in enumerate(fields[1:]):
        # The features come in as strings and must be parsed.
        try:
            vector[i] = float(field)
        except ValueError as exc:
            raise MalformedRecordError(
                f"feature {i} of {cui!r} is not a number ({field!r})",
                line=line,
                line_number=line_number,
                field=field,
            ) from exc
    vector.flags.writeable = False
    return cui, vector


def load_model(
    lines: Iterable[str],
    skip_first: bool = False,
    *,
    num_workers: int | None = None,
    queue_size: int | None = None,
    progress: bool = False,
) -> Embeddings:
    """
    Load a cui2vec model into memory.

    Args:
        lines: Lines of the CSV model, e.g. an open text file
        skip_first: Discard the first line (the header) without parsing it
        num_workers: Parser threads (default CUI2VEC_LOAD_WORKERS)
        queue_size: Lines buffered ahead of the parsers (default workers * CUI2VEC_QUEUE_FACTOR)
        progress: Show a tqdm progress bar over the input lines

    Returns:
        The fully loaded Embeddings

    Raises:
        MalformedRecordError: if any line fails to parse; no partial model is returned
    """
    workers = resolve_workers(num_workers, DEFAULT_LOAD_WORKERS)
    source = iter(lines)
    if skip_first:
        next(source, None)
    bar = tqdm(source, desc="Loading cui2vec", unit="line") if progress else None

    vectors: dict[str, NDArray[np.float64]] = {}
    vectors_lock = threading.Lock()
    skipped = 0

    def parse(item: tuple[int, str]) -> None:
        nonlocal skipped
        line_number, line = item
        record = parse_record(line, line_number)
        with vectors_lock:
            if record is None:
                skipped += 1
                logger.debug("Skipping empty line %d", line_number)
            else:
                cui, vector = record
                vectors[cui] = vector

    start = time.perf_counter()
    try:
        fan_out(
            enumerate(bar if bar is not None else source, start=2 if skip_first else 1),
            parse,
            workers,
            queue_size or workers * QUEUE_FACTOR,
        )
    finally:
        if bar is not None:
            bar.close()

    embeddings = Embeddings(vectors)
    logger.info(
        "Loaded %d concepts (dimension %d, %d empty lines skipped) in %.2fs",
        len(embeddings),
        embeddings.dimension,
        skipped,
        time.perf_counter() - start,
    )
    return embeddings


def load_model_file(
    path: str | os.PathLike[str],
    skip_first: bool = False,
    *,
    encoding: str = "utf-8",
    **kwargs: Any,
) -> Embeddings:
    """Open ``path`` and load it with load_model()."""
    with open(path, encoding=encoding, newline="") as f:
        return load_model(f, skip_first, **kwargs)


__all__ = [
    "Embeddings",
    "MalformedRecordError",
    "UnknownConceptError",
    "parse_record",
    "load_model",
    "load_model_file",
]
