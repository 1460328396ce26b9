"""Infers a shape from JSON Lines sample files.

This module provides:
- infer_shape_from_files: Fold sample files into an InferenceResult
- convert_jsonl_to_shape: Infer a shape and write it as a shape file
- load_shape_file: Read a shape file back
"""

import json
import logging
import os
from typing import List

from shapegen.samplereader import SampleDecodeError, iter_samples
from shapegen.shape import Shape, shape_from_json, shape_to_json
from shapegen.shape_inference import InferenceResult, ShapeInferrer, infer_shape_parallel

logger = logging.getLogger(__name__)


def infer_shape_from_files(input_files: List[str], sample_size: int = 0, workers: int = 1) -> InferenceResult:
    """Infers a shape from JSON Lines files.

    Lines that fail to decode are skipped and reported in the result.

    Args:
        input_files: List of JSON Lines file paths to analyze
        sample_size: Maximum number of samples to fold (0 = all)
        workers: Number of worker processes (1 = fold in-process)

    Returns:
        The inferred shape together with the sample and skip counts
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    inferrer = ShapeInferrer()
    if workers == 1:
        inferrer.observe_all(iter_samples(input_files, sample_size))
        return inferrer.result()

    values = []
    for sample in iter_samples(input_files, sample_size):
        if isinstance(sample, SampleDecodeError):
            inferrer.observe_error(sample)
        else:
            values.append(sample)
    result = inferrer.result()
    result.shape = infer_shape_parallel(values, workers=workers or None)
    result.sample_count = len(values)
    return result


def convert_jsonl_to_shape(
    input_files: List[str],
    shape_file: str,
    sample_size: int = 0,
    workers: int = 1
) -> InferenceResult:
    """Infers a shape from JSON Lines files and writes it to `shape_file`.

    Args:
        input_files: List of JSON Lines file paths to analyze
        shape_file: Output path for the shape
        sample_size: Maximum number of samples to fold (0 = all)
        workers: Number of worker processes (1 = fold in-process, 0 = one per CPU)
    """
    result = infer_shape_from_files(input_files, sample_size, workers)

    if result.sample_count == 0:
        raise ValueError("No valid JSON samples found in input files")
    if result.skipped:
        logger.warning("Skipped %d of %d samples that could not be decoded",
                       result.skipped_count, result.sample_count + result.skipped_count)
    logger.info("Inferred shape from %d samples", result.sample_count)

    # Ensure output directory exists
    output_dir = os.path.dirname(shape_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(shape_file, 'w', encoding='utf-8') as f:
        json.dump(shape_to_json(result.shape), f, indent=2)
    return result


def load_shape_file(shape_file: str) -> Shape:
    """Reads a shape written by `convert_jsonl_to_shape`."""
    with open(shape_file, 'r', encoding='utf-8') as f:
        return shape_from_json(json.load(f))
