"""Identifier case conversion and English pluralisation helpers."""
from __future__ import annotations

_ES_SUFFIXES = ("s", "x", "z", "ch", "sh")


def to_snake_case(name: str) -> str:
    """``BlogPost`` -> ``blog_post``.  Every uppercase letter after the first
    character starts a new word."""
    chars: list[str] = []
    for i, ch in enumerate(name):
        if i > 0 and ch.isupper():
            chars.append("_")
        chars.append(ch.lower())
    return "".join(chars)


def to_pascal_case(name: str) -> str:
    """``blog_post`` -> ``BlogPost``.  Only the first letter of each part changes."""
    return "".join(part[0].upper() + part[1:] for part in name.split("_") if part)


def to_camel_case(name: str) -> str:
    """``blog_post`` -> ``blogPost``."""
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def pluralize(word: str) -> str:
    """Naive English plural: ``y`` -> ``ies``; sibilants -> ``+es``; else ``+s``."""
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(_ES_SUFFIXES):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    """Best-effort inverse of :func:`pluralize`.

    Words that :func:`pluralize` could not have produced are returned as-is.
    """
    if word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if word.endswith("es") and word[:-2].endswith(_ES_SUFFIXES):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def table_name_for(model_name: str) -> str:
    """Derive the table name for a model: snake_case, then pluralised."""
    return pluralize(to_snake_case(model_name))
