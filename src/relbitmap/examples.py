"""
Example relation used by the demo and tests.

Animal/Color: which colors each animal comes in.
"""
from relbitmap.csv_parser import parse_relation_string
from relbitmap.model import UncompressedRelation

ANIMAL_COLOR_CSV = """Animal/Color,Red,Green,Blue
Cat,,x,
Dog,x,,x
"""


def build_example_relation(relation_name: str = "Zoo.Maps.AnimalColor") -> UncompressedRelation:
    return parse_relation_string(ANIMAL_COLOR_CSV, relation_name=relation_name).unwrap()
