"""Property tests for the TypeScript oracle's assignability relation.

Assignability is reflexive, unions accept each of their members, and a
method whose parameter is a union never narrows an interface parameter
typed with any member of that union.
"""

from hypothesis import given, strategies as st

from strictimpl.adapters.base import SymbolTable
from strictimpl.adapters.typescript.type_oracle import TypeScriptTypeOracle
from strictimpl.adapters.typescript.types import (
    AnyType,
    ArrayType,
    LiteralType,
    PrimitiveType,
    TupleType,
    union_of,
)

primitives = st.sampled_from(
    [PrimitiveType(name) for name in ("number", "string", "boolean", "bigint", "null")]
)
literals = st.builds(
    LiteralType,
    base=st.sampled_from(["number", "string"]),
    value=st.from_regex(r"[a-z0-9]{1,4}", fullmatch=True),
)
leaf_types = st.one_of(primitives, literals)

types = st.recursive(
    leaf_types,
    lambda children: st.one_of(
        st.builds(ArrayType, children),
        st.lists(children, min_size=1, max_size=3).map(lambda items: TupleType(tuple(items))),
        st.lists(children, min_size=2, max_size=3).map(union_of),
    ),
    max_leaves=6,
)

oracle = TypeScriptTypeOracle(SymbolTable())


@given(candidate=types)
def test_reflexive(candidate) -> None:
    assert oracle.is_assignable(candidate, candidate)


@given(members=st.lists(types, min_size=1, max_size=4))
def test_union_accepts_members(members) -> None:
    union = union_of(members)

    for member in members:
        assert oracle.is_assignable(member, union)


@given(candidate=types)
def test_top_types(candidate) -> None:
    assert oracle.is_assignable(candidate, AnyType("unknown"))
    assert oracle.is_assignable(AnyType("any"), candidate)
    assert oracle.is_assignable(PrimitiveType("never"), candidate)


@given(element=types, wider=types)
def test_arrays_follow_elements(element, wider) -> None:
    union = union_of([element, wider])

    assert oracle.is_assignable(ArrayType(element), ArrayType(union))
