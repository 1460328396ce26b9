"""Tests for converting values to shapes and folding samples."""

import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from shapegen.samplereader import SampleDecodeError
from shapegen.shape import (
    BOOL,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayShape,
    ObjectShape,
    OptionalShape,
    UnionShape,
    strip_optional,
)
from shapegen.shape_inference import (
    InferenceResult,
    ShapeInferrer,
    infer_shape,
    infer_shape_parallel,
    value_to_shape,
)


class TestValueToShape(unittest.TestCase):
    """Test cases for converting a single value."""

    def test_scalars(self):
        self.assertIs(value_to_shape(None), NULL)
        self.assertIs(value_to_shape(True), BOOL)
        self.assertIs(value_to_shape(False), BOOL)
        self.assertIs(value_to_shape(0), NUMBER)
        self.assertIs(value_to_shape(2.5), NUMBER)
        self.assertIs(value_to_shape(''), STRING)

    def test_integers_and_fractions_share_a_kind(self):
        self.assertEqual(value_to_shape([1, 2.5, -3]), ArrayShape(NUMBER))

    def test_empty_array_is_array_of_unknown(self):
        self.assertEqual(value_to_shape([]), ArrayShape(UNKNOWN))

    def test_mixed_array(self):
        """Converting [1, 2, "three"] yields an array of a number/string union."""
        self.assertEqual(value_to_shape([1, 2, "three"]), ArrayShape(UnionShape([NUMBER, STRING])))

    def test_object_keys_are_never_optional(self):
        shape = value_to_shape({"a": 1, "b": None, "c": {"d": [True]}})
        self.assertEqual(shape, ObjectShape({
            'a': NUMBER,
            'b': NULL,
            'c': ObjectShape({'d': ArrayShape(BOOL)}),
        }))

    def test_array_of_sparse_objects(self):
        shape = value_to_shape([{"id": 1, "name": "a"}, {"id": 2}])
        self.assertEqual(shape, ArrayShape(ObjectShape({'id': NUMBER, 'name': OptionalShape(STRING)})))

    def test_tuple_is_a_sequence(self):
        self.assertEqual(value_to_shape((1, 2)), ArrayShape(NUMBER))

    def test_non_json_values_are_rejected(self):
        with self.assertRaises(TypeError):
            value_to_shape({1, 2})
        with self.assertRaises(TypeError):
            value_to_shape(object())


class TestInferShape(unittest.TestCase):
    """Test cases for folding sequences of samples."""

    def test_empty_input_is_unknown(self):
        self.assertIs(infer_shape([]), UNKNOWN)

    def test_sparse_objects(self):
        shape = infer_shape([{"a": 1, "b": "x"}, {"a": 2, "c": True}])
        self.assertEqual(shape, ObjectShape({
            'a': NUMBER,
            'b': OptionalShape(STRING),
            'c': OptionalShape(BOOL),
        }))

    def test_disagreeing_root_kinds(self):
        self.assertEqual(infer_shape([1, "one", None, 2]), UnionShape([NUMBER, STRING, NULL]))

    def test_consumes_generators(self):
        shape = infer_shape({"n": i} for i in range(5))
        self.assertEqual(shape, ObjectShape({'n': NUMBER}))

    def test_journal_events(self):
        """Heterogeneous log events fold into one object with optional fields."""
        events = [
            {"timestamp": "2024-12-08T23:43:25Z", "event": "Fileheader", "part": 1, "odyssey": True},
            {"timestamp": "2024-12-08T23:43:30Z", "event": "Commander", "FID": "F123", "Name": "Jameson"},
            {"timestamp": "2024-12-08T23:44:01Z", "event": "Materials",
             "Raw": [{"Name": "iron", "Count": 12}], "Encoded": []},
        ]
        shape = infer_shape(events)
        self.assertEqual(shape['timestamp'], STRING)
        self.assertEqual(shape['event'], STRING)
        self.assertEqual(shape['part'], OptionalShape(NUMBER))
        self.assertEqual(shape['Name'], OptionalShape(STRING))
        self.assertEqual(shape['Raw'], OptionalShape(ArrayShape(ObjectShape({'Name': STRING, 'Count': NUMBER}))))
        self.assertEqual(shape['Encoded'], OptionalShape(ArrayShape(UNKNOWN)))


class TestShapeInferrer(unittest.TestCase):
    """Test cases for the streaming accumulator."""

    def test_observe(self):
        inferrer = ShapeInferrer()
        inferrer.observe({"id": 1})
        inferrer.observe({"id": "two"})
        result = inferrer.result()
        self.assertIsInstance(result, InferenceResult)
        self.assertEqual(result.shape, ObjectShape({'id': UnionShape([NUMBER, STRING])}))
        self.assertEqual(result.sample_count, 2)
        self.assertEqual(result.skipped_count, 0)

    def test_decode_errors_are_skipped(self):
        """A malformed sample contributes nothing and is reported separately."""
        error = SampleDecodeError('events.jsonl', 2, 5, 'Expecting value')
        with self.assertLogs('shapegen.shape_inference', level='WARNING'):
            result = ShapeInferrer().observe_all([{"a": 1}, error, {"a": 2}]).result()
        self.assertEqual(result.shape, ObjectShape({'a': NUMBER}))
        self.assertEqual(result.sample_count, 2)
        self.assertEqual(result.skipped, [error])

    def test_merge_shard_accumulators(self):
        left = ShapeInferrer().observe_all([{"a": 1, "b": "x"}])
        right = ShapeInferrer().observe_all([{"a": 2, "c": True}])
        result = left.merge(right).result()
        self.assertEqual(result.shape, infer_shape([{"a": 1, "b": "x"}, {"a": 2, "c": True}]))
        self.assertEqual(result.sample_count, 2)

    def test_empty_accumulator(self):
        result = ShapeInferrer().result()
        self.assertIs(result.shape, UNKNOWN)
        self.assertEqual(result.sample_count, 0)


class TestInferShapeParallel(unittest.TestCase):
    """Test cases for sharded inference."""

    values = (
        [{"id": i, "name": "item", "tags": ["a", "b"]} for i in range(10)]
        + [{"id": "x-1", "name": None, "tags": [1, 2]}]
        + [{"id": i, "name": "item", "tags": []} for i in range(7)]
        + [{"id": True, "name": "item", "tags": [{"k": 1}]}]
    )

    def test_in_process_shards_match_sequential_fold(self):
        shape = infer_shape_parallel(self.values, workers=1, shard_size=4)
        self.assertEqual(shape, infer_shape(self.values))

    def test_worker_processes_match_sequential_fold(self):
        shape = infer_shape_parallel(self.values, workers=2, shard_size=5)
        self.assertEqual(shape, infer_shape(self.values))

    def test_sparse_keys_depend_on_shard_grouping(self):
        """A key missing from some values can fold differently once sharded."""
        values = [{}, {"a": 1}, {"a": 1}, {}]
        sequential = infer_shape(values)
        sharded = infer_shape_parallel(values, workers=1, shard_size=1)
        self.assertEqual(sequential, ObjectShape({
            'a': OptionalShape(UnionShape([OptionalShape(NUMBER), NUMBER])),
        }))
        self.assertEqual(sharded, ObjectShape({'a': OptionalShape(NUMBER)}))
        self.assertEqual(strip_optional(sequential['a']), (True, NUMBER))
        self.assertEqual(strip_optional(sharded['a']), (True, NUMBER))

    def test_empty_input(self):
        self.assertIs(infer_shape_parallel([], workers=2), UNKNOWN)

    def test_invalid_shard_size(self):
        with self.assertRaises(ValueError):
            infer_shape_parallel([1], shard_size=0)


if __name__ == '__main__':
    unittest.main()
