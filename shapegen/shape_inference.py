"""Shape inference from JSON-like values.

This module provides:
- value_to_shape: the most specific shape of a single value
- ShapeInferrer: a streaming accumulator that folds samples into one shape
- infer_shape / infer_shape_parallel: sequential and sharded folds
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Sequence

from shapegen.samplereader import SampleDecodeError
from shapegen.shape import (
    BOOL,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayShape,
    ObjectShape,
    Shape,
)
from shapegen.unification import reduce_shapes, unify

logger = logging.getLogger(__name__)

DEFAULT_SHARD_SIZE = 1000


def value_to_shape(value: Any) -> Shape:
    """Maps a parsed JSON value to the shape describing exactly that value.

    No Optional or Union is introduced here except where the elements of a
    list disagree, since a list's item shape is the fold of its elements.

    Raises:
        TypeError: if `value` is not null, bool, number, string, list or dict.
    """
    if value is None:
        return NULL
    # bool is a subclass of int
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if isinstance(value, (list, tuple)):
        return ArrayShape(infer_shape(value))
    if isinstance(value, dict):
        return ObjectShape((str(key), value_to_shape(item)) for key, item in value.items())
    raise TypeError(f"Cannot infer a shape for {type(value).__name__} value {value!r}")


def infer_shape(values: Iterable[Any]) -> Shape:
    """Folds values into a single shape; an empty input yields Unknown."""
    result: Shape = UNKNOWN
    for value in values:
        result = unify(result, value_to_shape(value))
    return result


@dataclass
class InferenceResult:
    """The outcome of an inference run.

    Samples that failed to decode contribute nothing to `shape`; they are
    listed in `skipped`.
    """
    shape: Shape = UNKNOWN
    sample_count: int = 0
    skipped: List[SampleDecodeError] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


class ShapeInferrer:
    """Accumulates samples into a shape one at a time.

    Accumulators built over separate shards of the input can be combined
    with `merge`.
    """

    def __init__(self):
        self.shape: Shape = UNKNOWN
        self.sample_count = 0
        self.skipped: List[SampleDecodeError] = []

    def observe(self, value: Any) -> None:
        """Folds one decoded sample into the accumulated shape."""
        self.shape = unify(self.shape, value_to_shape(value))
        self.sample_count += 1

    def observe_error(self, error: SampleDecodeError) -> None:
        """Records a sample that could not be decoded."""
        logger.warning("Skipping sample: %s", error)
        self.skipped.append(error)

    def observe_all(self, samples: Iterable[Any]) -> 'ShapeInferrer':
        """Observes every sample; `SampleDecodeError` items are recorded as skipped."""
        for sample in samples:
            if isinstance(sample, SampleDecodeError):
                self.observe_error(sample)
            else:
                self.observe(sample)
        return self

    def merge(self, other: 'ShapeInferrer') -> 'ShapeInferrer':
        """Unifies another accumulator into this one."""
        self.shape = unify(self.shape, other.shape)
        self.sample_count += other.sample_count
        self.skipped.extend(other.skipped)
        return self

    def result(self) -> InferenceResult:
        return InferenceResult(self.shape, self.sample_count, list(self.skipped))


def _fold_shard(values: Sequence[Any]) -> Shape:
    return infer_shape(values)


def infer_shape_parallel(values: Sequence[Any], workers: int | None = None,
                         shard_size: int = DEFAULT_SHARD_SIZE) -> Shape:
    """Infers a shape by folding shards of `values` in worker processes.

    The partial shapes are unified pairwise once all shards are done.

    Args:
        values: Parsed JSON values
        workers: Number of worker processes (None = one per CPU, 1 = in-process)
        shard_size: Number of values folded per shard

    Returns:
        The inferred shape. It equals `infer_shape(values)` when every key is
        present in every value; keys missing from some values can come out as
        `Optional(X)` instead of `Union({Optional(X), X})`, depending on how
        the shards fall.
    """
    if shard_size < 1:
        raise ValueError("shard_size must be at least 1")
    shards = [values[i:i + shard_size] for i in range(0, len(values), shard_size)]
    if workers == 1 or len(shards) <= 1:
        return reduce_shapes(_fold_shard(shard) for shard in shards)
    logger.debug("Folding %d values in %d shards", len(values), len(shards))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        partials = list(executor.map(_fold_shard, shards))
    return reduce_shapes(partials)
