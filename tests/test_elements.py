"""Tests for descriptor parsing and the structural model."""

import pytest

from companion_gen.codegen.core.elements import (
    AnnotationMirror,
    DescriptorError,
    ElementKind,
    parse_type_element,
    parse_type_elements,
)
from companion_gen.codegen.core.model import (
    Constructor,
    Method,
    Modifier,
    Parameter,
    sort_modifiers,
)
from conftest import constructor, method, param, type_descriptor


class TestAnnotationMirror:
    def test_from_text(self):
        mirror = AnnotationMirror.from_text('@javax.inject.Named("db")')

        assert mirror.type_name == "javax.inject.Named"
        assert mirror.simple_name == "Named"
        assert mirror.text == '@javax.inject.Named("db")'

    def test_namespace_membership(self):
        mirror = AnnotationMirror.from_text("@com.companion.annotations.factory.Unbound")

        assert mirror.in_namespace("com.companion.annotations")
        assert not mirror.in_namespace("com.companion.annotation")
        assert not mirror.in_namespace("")

    def test_rejects_non_annotation(self):
        with pytest.raises(DescriptorError):
            AnnotationMirror.from_text("Named")


class TestParseTypeElement:
    """Test conversion of descriptor entries."""

    def test_full_entry(self, simple_test):
        assert simple_test.simple_name == "SimpleTest"
        assert simple_test.qualified_name == "com.example.SimpleTest"
        assert str(simple_test) == "com.example.SimpleTest"
        assert simple_test.has_annotation("factory")
        assert len(simple_test.elements_of_kind(ElementKind.CONSTRUCTOR)) == 2

    def test_method_members(self, model_element):
        methods = model_element.elements_of_kind(ElementKind.METHOD)

        assert [m.name for m in methods] == ["getString", "setString", "doSomething"]
        assert methods[0].return_type == "String"
        assert methods[1].parameters[0].name == "test"
        assert methods[1].modifiers == frozenset({Modifier.PUBLIC})

    def test_annotation_flags(self):
        element = parse_type_element(
            {"name": "A", "annotations": {"factory": True, "observable": False}}
        )

        assert element.get_annotation("factory") == {}
        assert not element.has_annotation("observable")

    def test_structured_annotation_entry(self):
        element = parse_type_element(
            type_descriptor(
                "A",
                [constructor({"type": "int", "name": "x", "annotations": [{"type": "a.B"}]})],
            )
        )

        mirror = element.enclosed_elements[0].parameters[0].annotations[0]
        assert mirror.type_name == "a.B"
        assert mirror.text == "@a.B"

    @pytest.mark.parametrize(
        "entry",
        [
            {},
            {"name": "A", "members": [{"kind": "field-ish", "name": "x"}]},
            {"name": "A", "members": [{"kind": "method"}]},
            {"name": "A", "members": [constructor({"name": "x"})]},
            {"name": "A", "members": [method("run", modifiers=["publik"])]},
            {"name": "A", "annotations": ["factory"]},
            "A",
        ],
    )
    def test_malformed_entries(self, entry):
        with pytest.raises(DescriptorError):
            parse_type_element(entry)

    def test_document_shapes(self, simple_test_descriptor, model_descriptor):
        wrapped = parse_type_elements({"types": [simple_test_descriptor, model_descriptor]})
        listed = parse_type_elements([simple_test_descriptor])
        single = parse_type_elements(model_descriptor)

        assert [e.simple_name for e in wrapped] == ["SimpleTest", "TestModel"]
        assert [e.simple_name for e in listed] == ["SimpleTest"]
        assert [e.simple_name for e in single] == ["TestModel"]

    def test_invalid_document(self):
        with pytest.raises(DescriptorError):
            parse_type_elements("types")
        with pytest.raises(DescriptorError):
            parse_type_elements({"types": {"name": "A"}})


class TestStructuralModel:
    """Test the immutable signature model."""

    def test_parameter_rendering(self):
        assert str(Parameter("int", "x")) == "int x"
        assert str(Parameter("int", "x", ("@A", "@B"))) == "@A @B int x"

    def test_parameter_equality_is_textual(self):
        assert Parameter("int", "x") == Parameter("int", "x")
        assert Parameter("int", "x") != Parameter("long", "x")
        assert Parameter("int", "x", ("@A",)) != Parameter("int", "x")
        assert len({Parameter("int", "x"), Parameter("int", "x")}) == 1

    def test_parameter_is_immutable(self):
        parameter = Parameter("int", "x")

        with pytest.raises(AttributeError):
            parameter.name = "y"

    def test_method_overridability(self):
        assert Method("run", modifiers=frozenset({Modifier.PUBLIC})).is_overridable
        assert not Method("run", modifiers=frozenset({Modifier.FINAL})).is_overridable
        assert not Method("run", modifiers=frozenset({Modifier.STATIC})).is_overridable

    def test_method_rendering(self):
        method_model = Method(
            "read",
            "int",
            (Parameter("byte[]", "buffer"),),
            ("java.io.IOException",),
            frozenset({Modifier.FINAL, Modifier.PUBLIC}),
        )

        assert str(method_model) == "public final int read(byte[] buffer) throws java.io.IOException"

    def test_constructor_rendering(self):
        assert str(Constructor((Parameter("int", "x"),))) == "<init>(int x)"

    def test_sort_modifiers(self):
        assert sort_modifiers(["final", "static", "public", "final"]) == [
            Modifier.PUBLIC,
            Modifier.STATIC,
            Modifier.FINAL,
        ]

    def test_parse_modifier(self):
        assert Modifier.parse("PUBLIC") == Modifier.PUBLIC
        with pytest.raises(ValueError):
            Modifier.parse("publik")
