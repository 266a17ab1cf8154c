"""cometql front end: schema DSL text → schema IR."""
from cometql.parse.annotations import Annotation, AnnotationParser
from cometql.parse.parser import SchemaParser, parse_schema

__all__ = [
    "Annotation",
    "AnnotationParser",
    "SchemaParser",
    "parse_schema",
]
