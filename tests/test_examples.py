"""
Test the Animal/Color example relation used by the demo.
"""

from relbitmap.compiler import compile_relation, lookup_members
from relbitmap.examples import build_example_relation


def test_example_relation_structure():
    relation = build_example_relation()

    assert relation.relation_name == "Zoo.Maps.AnimalColor"
    assert relation.row_members == ["Cat", "Dog"]
    assert relation.column_members == ["Red", "Green", "Blue"]
    assert relation.true_cells == {(0, 1), (1, 0), (1, 2)}


def test_example_queries():
    artifact = compile_relation(build_example_relation())

    assert lookup_members(artifact, "Cat", "Green")
    assert lookup_members(artifact, "Dog", "Red")
    assert not lookup_members(artifact, "Cat", "Blue")
