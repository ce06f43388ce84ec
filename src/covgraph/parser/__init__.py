from covgraph.parser.cobertura import CoberturaParser
from covgraph.parser.xml_reader import read_root

__all__ = ["CoberturaParser", "read_root"]
