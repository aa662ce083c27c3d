"""Tests for structural model extraction."""

import pytest

from companion_gen.codegen.core.elements import parse_type_element
from companion_gen.codegen.core.extraction import (
    ExtractionError,
    PrefixMatch,
    extract_constructors,
    extract_methods,
    extract_mutators,
    match_prefixes,
    validate_type_element,
)
from companion_gen.codegen.core.model import Modifier, Parameter
from conftest import UNBOUND, constructor, method, param, type_descriptor


def element(*members, **annotations):
    return parse_type_element(type_descriptor("Sample", members, **annotations))


class TestExtractConstructors:
    """Test constructor extraction."""

    def test_source_order(self, simple_test):
        constructors = extract_constructors(simple_test)

        assert [len(c.parameters) for c in constructors] == [4, 3]

    def test_control_annotations_stripped(self, simple_test):
        stuffs = extract_constructors(simple_test)[0].parameters[2]

        assert stuffs.annotations == ('@SuppressWarnings("Foo")',)

    def test_unbound_flag_recorded(self, simple_test):
        constructors = extract_constructors(
            simple_test, unbound_annotation="com.companion.annotations.factory.Unbound"
        )

        assert [p.unbound for p in constructors[0].parameters] == [False, False, True, True]

    def test_unbound_flag_ignored_without_marker(self, simple_test):
        constructors = extract_constructors(simple_test)

        assert not any(p.unbound for p in constructors[0].parameters)

    def test_unbound_flag_not_part_of_equality(self):
        assert Parameter("int", "n", unbound=True) == Parameter("int", "n")

    def test_thrown_types(self):
        sample = element(constructor(thrown=["java.io.IOException"]))

        assert extract_constructors(sample)[0].thrown_types == ("java.io.IOException",)

    def test_custom_namespace(self):
        sample = element(
            constructor(param("String", "a", "@org.acme.Marker", UNBOUND)),
        )

        parameter = extract_constructors(sample, namespace="org.acme")[0].parameters[0]

        assert parameter.annotations == (UNBOUND,)


class TestExtractMethods:
    def test_all_methods_in_order(self, model_element):
        names = [m.name for m in extract_methods(model_element)]

        assert names == ["getString", "setString", "doSomething"]

    def test_modifiers_and_return_type(self, model_element):
        getter = extract_methods(model_element)[0]

        assert getter.return_type == "String"
        assert getter.modifiers == frozenset({Modifier.PUBLIC})
        assert not getter.is_void


class TestMatchPrefixes:
    def test_requires_capitalised_subject(self):
        assert match_prefixes("settle", ["set"]) == []
        assert match_prefixes("set", ["set"]) == []
        assert match_prefixes("setX", ["set"]) == [("set", "X")]

    def test_several_prefixes(self):
        assert match_prefixes("setupName", ["set", "setup"]) == [("setup", "Name")]
        assert match_prefixes("setName", ["set", "s"]) == [("set", "Name")]


class TestExtractMutators:
    """Test mutator matching and accessor pairing."""

    def test_pairs_accessor(self, model_element):
        mutators, warnings = extract_mutators(model_element)

        assert warnings == []
        assert len(mutators) == 1
        mutator = mutators[0]
        assert mutator.method.name == "setString"
        assert mutator.prefix == "set"
        assert mutator.subject == "String"
        assert mutator.accessor.name == "getString"
        assert mutator.value_type == "String"

    def test_first_prefix_policy(self):
        sample = element(
            method("getName", return_type="String"),
            method("getXName", return_type="String"),
            method("setXName", param("String", "name")),
        )

        mutators, warnings = extract_mutators(sample, ("set", "setX"), PrefixMatch.FIRST)

        assert [m.subject for m in mutators] == ["XName"]
        assert len(warnings) == 1
        assert "several prefixes" in warnings[0]

    def test_all_prefixes_policy(self):
        sample = element(
            method("getName", return_type="String"),
            method("getXName", return_type="String"),
            method("setXName", param("String", "name")),
        )

        mutators, warnings = extract_mutators(sample, ("set", "setX"), PrefixMatch.ALL)

        assert [m.subject for m in mutators] == ["XName", "Name"]
        assert "all of them" in warnings[0]

    def test_non_overridable_methods_skipped(self):
        sample = element(
            method("getA", return_type="int"),
            method("setA", param("int", "a"), modifiers=("public", "final")),
            method("getB", return_type="int"),
            method("setB", param("int", "b"), modifiers=("private",)),
            method("getC", return_type="int"),
            method("setC", param("int", "c"), modifiers=("public", "static")),
        )

        mutators, warnings = extract_mutators(sample)

        assert mutators == []
        assert len(warnings) == 3

    def test_abstract_methods_skipped(self):
        sample = element(
            method("getA", return_type="int"),
            method("setA", param("int", "a"), modifiers=("public", "abstract")),
        )

        mutators, warnings = extract_mutators(sample)

        assert mutators == []
        assert "abstract" in warnings[0]

    def test_multiple_parameters_rejected(self):
        sample = element(
            method("getA", return_type="int"),
            method("setA", param("int", "a"), param("int", "b")),
        )

        with pytest.raises(ExtractionError, match="Sample.setA"):
            extract_mutators(sample)

    def test_no_parameters_rejected(self):
        sample = element(method("getA", return_type="int"), method("setA"))

        with pytest.raises(ExtractionError, match="found 0"):
            extract_mutators(sample)

    def test_missing_accessor_rejected(self):
        sample = element(method("setA", param("int", "a")))

        with pytest.raises(ExtractionError, match="getA"):
            extract_mutators(sample)

    def test_accessor_with_parameters_ignored(self):
        sample = element(
            method("getA", param("int", "index"), return_type="int"),
            method("setA", param("int", "a")),
        )

        with pytest.raises(ExtractionError):
            extract_mutators(sample)

    def test_private_accessor_rejected(self):
        sample = element(
            method("getA", return_type="int", modifiers=("private",)),
            method("setA", param("int", "a")),
        )

        with pytest.raises(ExtractionError, match="private"):
            extract_mutators(sample)

    def test_is_accessor_only_for_booleans(self):
        sample = element(
            method("isA", return_type="int"),
            method("setA", param("int", "a")),
        )

        with pytest.raises(ExtractionError):
            extract_mutators(sample)

    def test_get_preferred_over_is(self):
        sample = element(
            method("isOn", return_type="boolean"),
            method("getOn", return_type="boolean"),
            method("setOn", param("boolean", "on")),
        )

        mutators, _ = extract_mutators(sample)

        assert mutators[0].accessor.name == "getOn"

    def test_type_mismatch_keeps_accessor_type(self):
        sample = element(
            method("getA", return_type="long"),
            method("setA", param("int", "a")),
        )

        mutators, warnings = extract_mutators(sample)

        assert len(mutators) == 1
        assert "returns long" in warnings[0]
        assert mutators[0].value_type == "int"
        assert mutators[0].state_type == "long"

    def test_duplicate_subject_rejected(self):
        sample = element(
            method("getA", return_type="int"),
            method("setA", param("int", "a")),
            method("updateA", param("int", "a")),
        )

        with pytest.raises(ExtractionError, match="both observe"):
            extract_mutators(sample, ("set", "update"))


class TestValidateTypeElement:
    def test_valid(self, simple_test):
        validate_type_element(simple_test)

    def test_reserved_parameter_name(self):
        sample = element(constructor(param("int", "class")))

        with pytest.raises(ExtractionError, match="class"):
            validate_type_element(sample)

    def test_invalid_package(self):
        sample = parse_type_element(type_descriptor("Sample", package="com.1bad"))

        with pytest.raises(ExtractionError, match="package"):
            validate_type_element(sample)
