"""Converts an inferred shape to a JSON Schema document."""

import json
from typing import Any, Dict

from shapegen.common import write_output
from shapegen.jsonltoshape import load_shape_file
from shapegen.shape import (
    ArrayShape,
    BoolShape,
    NullShape,
    NumberShape,
    ObjectShape,
    OptionalShape,
    Shape,
    StringShape,
    UnionShape,
    strip_optional,
)

JSON_SCHEMA_DIALECT = 'https://json-schema.org/draft/2020-12/schema'


class ShapeToJsonSchemaConverter:
    """Maps shapes to JSON Schema nodes.

    Object properties are required unless their shape is Optional or a
    union with an Optional member. An Optional anywhere else (array items,
    union members) cannot express absence and is rendered as its inner
    schema.
    """

    primitive_types = {
        NullShape: 'null',
        NumberShape: 'number',
        BoolShape: 'boolean',
        StringShape: 'string',
    }

    def convert(self, shape: Shape) -> Dict[str, Any]:
        if isinstance(shape, OptionalShape):
            return self.convert(shape.inner)
        if isinstance(shape, ArrayShape):
            return {'type': 'array', 'items': self.convert(shape.items)}
        if isinstance(shape, ObjectShape):
            return self.convert_object(shape)
        if isinstance(shape, UnionShape):
            _, present = strip_optional(shape)
            if not isinstance(present, UnionShape):
                return self.convert(present)
            return {'anyOf': [self.convert(member) for member in present.members]}
        if type(shape) in self.primitive_types:
            return {'type': self.primitive_types[type(shape)]}
        # Unknown: nothing observed, any value is acceptable
        return {}

    def convert_object(self, shape: ObjectShape) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        required = []
        for key, value in shape.items():
            optional, present = strip_optional(value)
            properties[key] = self.convert(present)
            if not optional:
                required.append(key)
        schema: Dict[str, Any] = {'type': 'object', 'properties': properties}
        if required:
            schema['required'] = required
        return schema

    def convert_document(self, shape: Shape, title: str = 'Document') -> Dict[str, Any]:
        """Converts the root shape into a standalone schema document."""
        schema: Dict[str, Any] = {'$schema': JSON_SCHEMA_DIALECT, 'title': title}
        schema.update(self.convert(shape))
        return schema


def convert_shape_to_json_schema_dict(shape: Shape, title: str = 'Document') -> Dict[str, Any]:
    """Converts a shape to a JSON Schema document."""
    return ShapeToJsonSchemaConverter().convert_document(shape, title)


def convert_shape_to_json_schema(shape_file: str, json_schema_file: str, title: str = 'Document') -> None:
    """Reads a shape file and writes the equivalent JSON Schema.

    Args:
        shape_file: Path of a shape written by jsonl2shape
        json_schema_file: Output path for the JSON Schema
        title: Title of the root schema
    """
    shape = load_shape_file(shape_file)
    schema = convert_shape_to_json_schema_dict(shape, title)
    write_output(json_schema_file, json.dumps(schema, indent=2))
