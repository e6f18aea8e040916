import pytest

from javadoc_autofill.adapters.java_adapter import JavaAdapter
from javadoc_autofill.doc.model import TagKind
from javadoc_autofill.errors import JavaParseError
from javadoc_autofill.model import AnnotationMember, EnumConstant, Method, TypeDecl


def names(unit):
    return [(type(d).__name__, d.name) for d in unit.declarations]


def test_collects_declarations_in_source_order():
    code = """
    package demo;

    public class Outer<T> {
        private int count = 0;

        public Outer(int count) { this.count = count; }

        /** Inner doc. */
        static class Inner {
            void f() {}
        }

        public <R> R map(java.util.function.Function<T, R> fn) throws java.io.IOException {
            return null;
        }
    }

    enum Color { RED, GREEN }

    @interface Marker {
        String value();
        int[] sizes();
    }
    """
    unit = JavaAdapter().build_unit(code)
    assert names(unit) == [
        ("TypeDecl", "Outer"),
        ("Method", "Outer"),
        ("TypeDecl", "Inner"),
        ("Method", "f"),
        ("Method", "map"),
        ("TypeDecl", "Color"),
        ("EnumConstant", "RED"),
        ("EnumConstant", "GREEN"),
        ("TypeDecl", "Marker"),
        ("AnnotationMember", "value"),
        ("AnnotationMember", "sizes"),
    ]

    by_name = {d.name: d for d in unit.declarations if not isinstance(d, Method) or not d.is_constructor}
    ctor = unit.methods()[0]
    assert ctor.is_constructor and ctor.return_type is None
    assert [(p.name, p.type_name) for p in ctor.parameters] == [("count", "int")]

    inner = by_name["Inner"]
    assert isinstance(inner, TypeDecl)
    assert inner.comment.description == "Inner doc."

    m = by_name["map"]
    assert m.type_parameters == ["R"]
    assert m.return_type == "R"
    assert m.parameters[0].type_name == "java.util.function.Function<T, R>"
    assert m.throws == ["java.io.IOException"]

    assert unit.types()[-1].kind == "annotation"
    sizes = unit.annotation_members()[1]
    assert isinstance(sizes, AnnotationMember)
    assert sizes.return_type == "int[]"
    assert isinstance(by_name["RED"], EnumConstant)


def test_type_text_covers_wildcards_arrays_and_varargs():
    code = "class A { void f(java.util.List<? extends Number> a, String[] b, int... c) {} }"
    m = JavaAdapter().build_unit(code).methods()[0]
    assert [p.type_name for p in m.parameters] == ["java.util.List<? extends Number>", "String[]", "int..."]


def test_existing_javadoc_is_parsed_and_located():
    code = "class A {\n    /**\n     * Adds.\n     * @return sum\n     */\n    int add() { return 1; }\n}\n"
    unit = JavaAdapter().build_unit(code)
    m = unit.methods()[0]
    assert m.comment.description == "Adds."
    assert m.comment.find(TagKind.RETURN).content == "sum"
    assert code[m.site.javadoc.start:m.site.javadoc.end].startswith("/**")
    assert m.site.indent == "    "
    assert m.comment_changed is False


def test_field_initializer_does_not_shadow_method():
    code = "class A {\n    int x = compute();\n\n    int compute() { return 1; }\n}\n"
    unit = JavaAdapter().build_unit(code)
    m = unit.methods()[0]
    assert code[m.site.offset:].startswith("int compute()")


def test_annotations_belong_to_the_declaration():
    code = '/** Doc. */\n@Deprecated\n@SuppressWarnings("x")\nclass A {\n    @Override\n    public String toString() { return ""; }\n}\n'
    unit = JavaAdapter().build_unit(code)
    a, ts = unit.declarations
    assert a.comment.description == "Doc."
    assert code[a.site.offset:].startswith("@Deprecated")
    assert code[ts.site.offset:].startswith("@Override")


def test_render_without_changes_is_identity():
    code = "// header\nclass A {\n  void f() {}\n}\n"
    adapter = JavaAdapter()
    assert adapter.render(adapter.build_unit(code)) == code


def test_parse_failure_raises_java_parse_error():
    with pytest.raises(JavaParseError):
        JavaAdapter().build_unit("class {")
    with pytest.raises(JavaParseError):
        JavaAdapter().build_unit('class A { String s = "unterminated; }')


def test_bom_and_newline_detected():
    unit = JavaAdapter().build_unit("\ufeffclass A {\r\n}\r\n")
    assert unit.bom == "\ufeff"
    assert unit.newline == "\r\n"
    assert not unit.code.startswith("\ufeff")
