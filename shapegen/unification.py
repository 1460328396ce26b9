"""Unification (join) of shapes.

`unify` computes the least general shape that covers both of its operands.
It is pure, total and commutative. It is associative except where a key is
missing from some samples: `Optional(X)` joined with a present `X` gives
`Union({Optional(X), X})`, so regrouping a fold over sparse objects can
yield `Optional(X)` instead. `strip_optional` reads both forms the same.
"""

from typing import Dict, Iterable, List

from shapegen.shape import (
    UNKNOWN,
    ArrayShape,
    BoolShape,
    NullShape,
    NumberShape,
    ObjectShape,
    OptionalShape,
    Shape,
    StringShape,
    UnionShape,
    UnknownShape,
    optional_of,
)

GROUND_TYPES = (NullShape, NumberShape, BoolShape, StringShape)


def unify(a: Shape, b: Shape) -> Shape:
    """Returns the most general shape that can represent both `a` and `b`.

    The rules apply in order and the first match wins:

    1. Unknown is the identity.
    2. Equal ground kinds unify to themselves.
    3. Arrays unify their item shapes; objects unify common keys and make
       keys seen on one side only Optional.
    4. Two Optionals unify their inner shapes.
    5. Everything else folds into a flattened, deduplicated Union.
    """
    if isinstance(a, UnknownShape):
        return b
    if isinstance(b, UnknownShape):
        return a
    if isinstance(a, GROUND_TYPES) and type(a) is type(b):
        return a
    if isinstance(a, ArrayShape) and isinstance(b, ArrayShape):
        return ArrayShape(unify(a.items, b.items))
    if isinstance(a, ObjectShape) and isinstance(b, ObjectShape):
        return _unify_objects(a, b)
    if isinstance(a, OptionalShape) and isinstance(b, OptionalShape):
        return OptionalShape(unify(a.inner, b.inner))
    return UnionShape((a, b))


def _unify_objects(lhs: ObjectShape, rhs: ObjectShape) -> ObjectShape:
    fields: Dict[str, Shape] = {}
    for key, shape in lhs.items():
        other = rhs.get(key)
        fields[key] = optional_of(shape) if other is None else unify(shape, other)
    for key, shape in rhs.items():
        if key not in fields:
            fields[key] = optional_of(shape)
    return ObjectShape(fields)


def unify_all(shapes: Iterable[Shape]) -> Shape:
    """Left fold of `unify` over `shapes`, seeded with Unknown."""
    result: Shape = UNKNOWN
    for shape in shapes:
        result = unify(result, shape)
    return result


def reduce_shapes(shapes: Iterable[Shape]) -> Shape:
    """Unifies partial results pairwise, tree-reduction style.

    Matches `unify_all` up to the order of union members when every key is
    present in every shape. With sparse keys a field can come out as
    `Optional(X)` here where the sequential fold gives
    `Union({Optional(X), X})`.
    """
    level: List[Shape] = list(shapes)
    if not level:
        return UNKNOWN
    while len(level) > 1:
        paired = [unify(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]
