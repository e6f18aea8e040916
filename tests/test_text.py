from javadoc_autofill.doc.text import (
    describe_declaration,
    describe_param,
    describe_return,
    describe_throws,
    describe_type_param,
    format_generic_type,
    strip_generic_brackets,
)


def test_strip_generic_brackets_nested():
    assert strip_generic_brackets("Map<String, List<Item>>") == "Map"
    assert strip_generic_brackets("a <b> c") == "a  c"
    assert strip_generic_brackets("") == ""
    assert strip_generic_brackets(None) == ""


def test_strip_generic_brackets_keeps_unbalanced():
    assert strip_generic_brackets("x > y") == "x > y"
    assert strip_generic_brackets("List<String") == "List<String"


def test_strip_generic_brackets_is_idempotent():
    for text in ["Map<K, List<V>>", "a<b>c<d<e>>f", "plain", "x < y", "<<>>"]:
        once = strip_generic_brackets(text)
        assert strip_generic_brackets(once) == once


def test_format_generic_type():
    assert format_generic_type("List<Map<K, V>>") == "List(Map(K, V))"
    assert format_generic_type(None) == ""


def test_param_buckets_in_priority_order():
    assert describe_param("userId") == "identifier parameter userId"
    assert describe_param("name") == "name parameter name"
    assert describe_param("itemList") == "list parameter itemList"
    assert describe_param("lookupMap") == "map parameter lookupMap"
    assert describe_param("byteStream") == "stream parameter byteStream"
    assert describe_param("inputFile") == "input/output parameter inputFile"
    assert describe_param("x") == "generic parameter x"
    assert describe_param("count") == "the count parameter"


def test_param_id_wins_over_name():
    # "idName" holds both needles
    assert describe_param("idName") == "identifier parameter idName"


def test_param_with_generic_type_appends_type():
    assert describe_param("items", "List<String>") == "the items parameter, type List(String)"
    assert describe_param("count", "int") == "the count parameter"


def test_return_buckets():
    assert describe_return("String") == "returns a string"
    assert describe_return("int") == "returns an integer value"
    assert describe_return("Long") == "returns an integer value"
    assert describe_return("boolean") == "returns a boolean, true or false"
    assert describe_return("List<String>") == "returns list data, type List(String)"
    assert describe_return("Map<String, Item>") == "returns map data, type Map(String, Item)"
    assert describe_return("void") == "no return value"
    assert describe_return("Order") == "returns a value of type Order"


def test_return_bucket_ignores_type_arguments():
    # String inside the brackets must not pick the string bucket
    assert describe_return("List<String>").startswith("returns list data")


def test_canonical_texts():
    assert describe_throws("IOException") == "thrown when the operation fails with IOException"
    assert describe_throws("Failure<T>") == "thrown when the operation fails with Failure"
    assert describe_type_param("T") == "generic type parameter T"
    assert describe_declaration("Order", "class") == "Order class description"
