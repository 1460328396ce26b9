"""Shape model for structural type inference.

A shape describes the structure of one or more observed JSON-like values.
Shapes are immutable and hashable; equality is structural. Object keys
compare without regard to order and union members compare as a set, while
both keep their first-seen order for display and serialization.
"""

from typing import Any, Dict, Iterable, List, Tuple

JsonNode = Dict[str, 'JsonNode'] | List['JsonNode'] | str


class Shape:
    """Base class for all shape variants."""

    __slots__ = ()
    kind = ''

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(self.kind)

    def __reduce__(self):
        return (_ground_shape, (self.kind,))

    def __repr__(self):
        return self.kind.capitalize()


class UnknownShape(Shape):
    """Bottom element: nothing has been observed yet."""
    __slots__ = ()
    kind = 'unknown'


class NullShape(Shape):
    __slots__ = ()
    kind = 'null'


class NumberShape(Shape):
    __slots__ = ()
    kind = 'number'


class BoolShape(Shape):
    __slots__ = ()
    kind = 'bool'


class StringShape(Shape):
    __slots__ = ()
    kind = 'string'


UNKNOWN = UnknownShape()
NULL = NullShape()
NUMBER = NumberShape()
BOOL = BoolShape()
STRING = StringShape()

GROUND_SHAPES: Dict[str, Shape] = {
    'unknown': UNKNOWN,
    'null': NULL,
    'number': NUMBER,
    'bool': BOOL,
    'string': STRING,
}


def _ground_shape(kind: str) -> Shape:
    return GROUND_SHAPES[kind]


class OptionalShape(Shape):
    """A shape that is not present in every sample."""

    __slots__ = ('inner',)
    kind = 'optional'

    def __init__(self, inner: Shape):
        object.__setattr__(self, 'inner', inner)

    def __eq__(self, other):
        return isinstance(other, OptionalShape) and self.inner == other.inner

    def __hash__(self):
        return hash((self.kind, self.inner))

    def __reduce__(self):
        return (OptionalShape, (self.inner,))

    def __repr__(self):
        return f"Optional({self.inner!r})"


class ArrayShape(Shape):
    """A sequence whose elements all match `items`."""

    __slots__ = ('items',)
    kind = 'array'

    def __init__(self, items: Shape):
        object.__setattr__(self, 'items', items)

    def __eq__(self, other):
        return isinstance(other, ArrayShape) and self.items == other.items

    def __hash__(self):
        return hash((self.kind, self.items))

    def __reduce__(self):
        return (ArrayShape, (self.items,))

    def __repr__(self):
        return f"Array({self.items!r})"


class ObjectShape(Shape):
    """A record mapping field names to shapes."""

    __slots__ = ('_fields',)
    kind = 'object'

    def __init__(self, fields: Dict[str, Shape] | Iterable[Tuple[str, Shape]] = ()):
        object.__setattr__(self, '_fields', dict(fields))

    @property
    def fields(self) -> Dict[str, Shape]:
        """A copy of the field mapping, in first-seen key order."""
        return dict(self._fields)

    def keys(self):
        return self._fields.keys()

    def items(self):
        return self._fields.items()

    def get(self, key: str, default: Shape | None = None) -> Shape | None:
        return self._fields.get(key, default)

    def __getitem__(self, key: str) -> Shape:
        return self._fields[key]

    def __contains__(self, key) -> bool:
        return key in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other):
        return isinstance(other, ObjectShape) and self._fields == other._fields

    def __hash__(self):
        return hash((self.kind, frozenset(self._fields.items())))

    def __reduce__(self):
        return (ObjectShape, (self._fields,))

    def __repr__(self):
        inner = ', '.join(f"{key!r}: {value!r}" for key, value in self._fields.items())
        return f"Object({{{inner}}})"


class UnionShape(Shape):
    """One of several structurally distinct shapes.

    Members that are themselves unions are flattened into this one and
    structurally equal members are kept once, in first-seen order.
    """

    __slots__ = ('members',)
    kind = 'union'

    def __init__(self, members: Iterable[Shape]):
        flat: List[Shape] = []
        for member in members:
            candidates = member.members if isinstance(member, UnionShape) else (member,)
            for candidate in candidates:
                if candidate not in flat:
                    flat.append(candidate)
        object.__setattr__(self, 'members', tuple(flat))

    def __iter__(self):
        return iter(self.members)

    def __len__(self) -> int:
        return len(self.members)

    def __eq__(self, other):
        return isinstance(other, UnionShape) and frozenset(self.members) == frozenset(other.members)

    def __hash__(self):
        return hash((self.kind, frozenset(self.members)))

    def __reduce__(self):
        return (UnionShape, (self.members,))

    def __repr__(self):
        return f"Union({{{', '.join(repr(m) for m in self.members)}}})"


def optional_of(shape: Shape) -> Shape:
    """Wraps a shape in Optional, unless it already is one."""
    if isinstance(shape, OptionalShape):
        return shape
    return OptionalShape(shape)


def shape_to_json(shape: Shape) -> JsonNode:
    """Serializes a shape to a JSON-compatible node.

    Ground kinds become their kind name; compound shapes become a
    single-key object named after their kind.
    """
    if isinstance(shape, OptionalShape):
        return {'optional': shape_to_json(shape.inner)}
    if isinstance(shape, ArrayShape):
        return {'array': shape_to_json(shape.items)}
    if isinstance(shape, UnionShape):
        return {'union': [shape_to_json(member) for member in shape.members]}
    if isinstance(shape, ObjectShape):
        return {'object': {key: shape_to_json(value) for key, value in shape.items()}}
    return shape.kind


def shape_from_json(node: Any) -> Shape:
    """Reads a shape from the node format written by `shape_to_json`."""
    if isinstance(node, str):
        if node not in GROUND_SHAPES:
            raise ValueError(f"Unknown shape kind '{node}'")
        return GROUND_SHAPES[node]
    if not isinstance(node, dict) or len(node) != 1:
        raise ValueError(f"Invalid shape node: {node!r}")
    kind, body = next(iter(node.items()))
    if kind == 'optional':
        return OptionalShape(shape_from_json(body))
    if kind == 'array':
        return ArrayShape(shape_from_json(body))
    if kind == 'union':
        if not isinstance(body, list):
            raise ValueError(f"Union members must be a list, got {body!r}")
        return UnionShape(shape_from_json(member) for member in body)
    if kind == 'object':
        if not isinstance(body, dict):
            raise ValueError(f"Object fields must be a mapping, got {body!r}")
        return ObjectShape((key, shape_from_json(value)) for key, value in body.items())
    raise ValueError(f"Unknown shape kind '{kind}'")


def strip_optional(shape: Shape) -> Tuple[bool, Shape]:
    """Splits a shape into (may be absent, present shape).

    A union counts as optional when any of its members is Optional; the
    members are unwrapped and a union left with one member collapses to
    that member. Meant for consumers that render absence separately, such
    as schema emitters.
    """
    optional = False
    while True:
        if isinstance(shape, OptionalShape):
            optional, shape = True, shape.inner
        elif isinstance(shape, UnionShape) and any(isinstance(m, OptionalShape) for m in shape.members):
            optional = True
            shape = UnionShape(m.inner if isinstance(m, OptionalShape) else m for m in shape.members)
            if len(shape) == 1:
                shape = shape.members[0]
        else:
            return optional, shape
