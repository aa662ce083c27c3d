"""Pytest fixtures for tests."""

import pytest

from companion_gen.codegen.core.config import GeneratorConfig
from companion_gen.codegen.core.elements import parse_type_element
from companion_gen.codegen.processor import (
    Filer,
    MemoryFiler,
    ProcessingEnvironment,
)

UNBOUND = "@com.companion.annotations.factory.Unbound"


def squash(code):
    """Collapse all whitespace so rendered layout does not matter."""
    return " ".join(code.split())


def param(type_name, name, *annotations):
    return {"type": type_name, "name": name, "annotations": list(annotations)}


def constructor(*parameters, thrown=()):
    return {"kind": "constructor", "parameters": list(parameters), "thrown": list(thrown)}


def method(name, *parameters, return_type="void", modifiers=("public",), thrown=()):
    return {
        "kind": "method",
        "name": name,
        "return_type": return_type,
        "modifiers": list(modifiers),
        "parameters": list(parameters),
        "thrown": list(thrown),
    }


def type_descriptor(name, members=(), package="com.example", **annotations):
    return {
        "name": name,
        "package": package,
        "annotations": annotations,
        "members": list(members),
    }


@pytest.fixture
def config():
    """Default generator configuration without header comments."""
    return GeneratorConfig(add_comments=False)


@pytest.fixture
def simple_test_descriptor():
    """Two constructors sharing two bound parameters."""
    return type_descriptor(
        "SimpleTest",
        [
            constructor(
                param("String", "foo"),
                param("String", "bar"),
                param("List<String>", "stuffs", '@SuppressWarnings("Foo")', UNBOUND),
                param("int", "meh", UNBOUND, "@Deprecated"),
            ),
            constructor(
                param("String", "foo"),
                param("String", "bar"),
                param("String", "baz", UNBOUND),
            ),
        ],
        factory={},
    )


@pytest.fixture
def simple_test(simple_test_descriptor):
    return parse_type_element(simple_test_descriptor)


@pytest.fixture
def model_descriptor():
    """Model with one observed setter and its accessor."""
    return type_descriptor(
        "TestModel",
        [
            constructor(param("String", "test")),
            method("getString", return_type="String"),
            method("setString", param("String", "test")),
            method("doSomething"),
        ],
        observable={},
    )


@pytest.fixture
def model_element(model_descriptor):
    return parse_type_element(model_descriptor)


@pytest.fixture
def output_dir(tmp_path):
    directory = tmp_path / "generated"
    directory.mkdir()
    return directory


@pytest.fixture
def disk_environment(output_dir):
    return ProcessingEnvironment(filer=Filer(output_dir))


@pytest.fixture
def memory_environment():
    return ProcessingEnvironment(filer=MemoryFiler())
