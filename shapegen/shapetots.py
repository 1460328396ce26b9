# pylint: disable=line-too-long

""" ShapeToTypeScript class for converting an inferred shape to TypeScript interfaces """

import json
import os
from typing import Any, Dict, List, Set

from shapegen.common import is_identifier, process_template, to_type_name, write_output
from shapegen.jsonltoshape import infer_shape_from_files, load_shape_file
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


class ShapeToTypeScript:
    """ Converts an inferred shape to TypeScript interface declarations """

    primitive_types = {
        NullShape: 'null',
        NumberShape: 'number',
        BoolShape: 'boolean',
        StringShape: 'string',
    }

    def __init__(self) -> None:
        self.interfaces: List[Dict[str, Any]] = []
        self.used_names: Set[str] = set()

    def unique_name(self, name: str) -> str:
        """ Returns `name`, suffixed with a counter if it is already taken """
        candidate = name
        counter = 2
        while candidate in self.used_names:
            candidate = f"{name}{counter}"
            counter += 1
        self.used_names.add(candidate)
        return candidate

    def convert_type(self, shape: Shape, name: str) -> str:
        """ Returns the TypeScript type expression for a shape; objects are emitted as interfaces """
        if isinstance(shape, ObjectShape):
            return self.convert_object(shape, name)
        if isinstance(shape, ArrayShape):
            item_type = self.convert_type(shape.items, name + 'Item')
            if ' | ' in item_type:
                return f"({item_type})[]"
            return f"{item_type}[]"
        if isinstance(shape, UnionShape):
            optional, present = strip_optional(shape)
            if optional:
                return f"{self.convert_type(present, name)} | undefined"
            return ' | '.join(self.convert_type(member, name) for member in shape.members)
        if isinstance(shape, OptionalShape):
            return f"{self.convert_type(shape.inner, name)} | undefined"
        return self.primitive_types.get(type(shape), 'unknown')

    def convert_object(self, shape: ObjectShape, name: str) -> str:
        """ Registers an interface for an object shape and returns its name """
        interface: Dict[str, Any] = {'name': self.unique_name(name), 'fields': []}
        self.interfaces.append(interface)
        for key, value in shape.items():
            optional, field_shape = strip_optional(value)
            interface['fields'].append({
                'name': key if is_identifier(key) else json.dumps(key),
                'optional': optional,
                'type': self.convert_type(field_shape, name + to_type_name(key)),
            })
        return interface['name']

    def generate(self, shape: Shape, root_name: str = 'Document', source: str = 'samples') -> str:
        """ Generates the TypeScript declarations for a root shape """
        self.interfaces = []
        self.used_names = set()
        root_name = to_type_name(root_name)
        alias = None
        if isinstance(shape, ObjectShape):
            self.convert_object(shape, root_name)
        else:
            self.used_names.add(root_name)
            alias = {'name': root_name, 'type': self.convert_type(shape, root_name)}
        return process_template(
            'shapetots/interfaces.ts.jinja',
            interfaces=self.interfaces,
            alias=alias,
            source=source)


def convert_shape_to_typescript_source(shape: Shape, type_name: str = 'Document', source: str = 'samples') -> str:
    """ Converts a shape to TypeScript declarations """
    return ShapeToTypeScript().generate(shape, type_name, source)


def convert_shape_to_typescript(shape_file: str, ts_file: str, type_name: str = 'Document') -> None:
    """ Reads a shape file and writes TypeScript declarations for it

    Args:
        shape_file: Path of a shape written by jsonl2shape
        ts_file: Output path for the TypeScript file
        type_name: Name of the root type
    """
    shape = load_shape_file(shape_file)
    source = convert_shape_to_typescript_source(shape, type_name, os.path.basename(shape_file))
    write_output(ts_file, source)


def convert_jsonl_to_typescript(input_files: List[str], ts_file: str, type_name: str = 'Document',
                                sample_size: int = 0, workers: int = 1) -> None:
    """ Infers a shape from JSON Lines files and writes TypeScript declarations for it

    Args:
        input_files: List of JSON Lines file paths to analyze
        ts_file: Output path for the TypeScript file
        type_name: Name of the root type
        sample_size: Maximum number of samples to fold (0 = all)
        workers: Number of worker processes (1 = fold in-process, 0 = one per CPU)
    """
    result = infer_shape_from_files(input_files, sample_size, workers)
    if result.sample_count == 0:
        raise ValueError("No valid JSON samples found in input files")
    source = ', '.join(os.path.basename(f) for f in input_files)
    write_output(ts_file, convert_shape_to_typescript_source(result.shape, type_name, source))
