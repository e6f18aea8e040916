import re
from typing import Optional

# one generic span without nesting, e.g. "<String>" or "<K, V>"
_GENERIC_SPAN = re.compile(r"<[^<>]*>")

_PARAM_BUCKETS = (
    (("id",), "identifier parameter {name}"),
    (("name",), "name parameter {name}"),
    (("list",), "list parameter {name}"),
    (("map",), "map parameter {name}"),
    (("stream",), "stream parameter {name}"),
    (("input", "output"), "input/output parameter {name}"),
)

_RETURN_BUCKETS = (
    (("string",), "returns a string"),
    (("int", "long", "short", "integer"), "returns an integer value"),
    (("boolean",), "returns a boolean, true or false"),
    (("list",), "returns list data, type {shown}"),
    (("map",), "returns map data, type {shown}"),
    (("void",), "no return value"),
)


def strip_generic_brackets(text: Optional[str]) -> str:
    """
    Remove every `<...>` span from text, innermost first, until none is left.
    Unbalanced brackets are kept. Idempotent.
    """
    if not text:
        return ""
    previous = None
    while previous != text:
        previous, text = text, _GENERIC_SPAN.sub("", text)
    return text


def has_angle_brackets(text: str) -> bool:
    return "<" in text or ">" in text


def escape_angle_brackets(text: str) -> str:
    """HTML-escape brackets left over after stripping, e.g. "must be > 0"."""
    return text.replace("<", "&lt;").replace(">", "&gt;")


def format_generic_type(type_name: Optional[str]) -> str:
    """
    Bracket-free rendering of a type that keeps its arguments:
      List<Map<K, V>>  ->  List(Map(K, V))
    """
    if not type_name:
        return ""
    return type_name.replace("<", "(").replace(">", ")")


def describe_param(name: Optional[str], type_name: Optional[str] = None) -> str:
    if not name:
        return "parameter description"

    clean = strip_generic_brackets(name)
    lowered = clean.lower()

    description = None
    for needles, template in _PARAM_BUCKETS:
        if any(n in lowered for n in needles):
            description = template.format(name=clean)
            break
    if description is None:
        if len(lowered) <= 2:
            description = f"generic parameter {clean}"
        else:
            description = f"the {clean} parameter"

    if type_name and "<" in type_name:
        description += ", type " + format_generic_type(type_name)
    return description


def describe_return(type_name: Optional[str]) -> str:
    if not type_name:
        return "the return value"

    shown = format_generic_type(type_name)
    lowered = strip_generic_brackets(type_name).lower()

    for needles, template in _RETURN_BUCKETS:
        if any(n in lowered for n in needles):
            return template.format(shown=shown)
    return f"returns a value of type {shown}"


def describe_throws(exception_name: Optional[str]) -> str:
    if not exception_name:
        return "thrown when the operation fails"
    return f"thrown when the operation fails with {strip_generic_brackets(exception_name)}"


def describe_type_param(name: str) -> str:
    return f"generic type parameter {name}"


def describe_declaration(name: str, kind_word: str) -> str:
    return f"{name} {kind_word} description"
