"""Tests for the observable generator."""

import pytest

from companion_gen.codegen.core.config import ConfigError, GeneratorConfig
from companion_gen.codegen.core.elements import parse_type_element
from companion_gen.codegen.core.extraction import ExtractionError, PrefixMatch
from companion_gen.codegen.core.generator import generate_code
from companion_gen.codegen.generators.observable import (
    ObservableConfig,
    ObservableGenerator,
)
from conftest import constructor, method, param, squash, type_descriptor


def generate(descriptor, **config):
    config.setdefault("add_comments", False)
    generator = ObservableGenerator(GeneratorConfig(**config))
    return generator.generate(parse_type_element(descriptor))


class TestObservableConfig:
    """Test reading observable annotation values."""

    def test_defaults(self):
        settings = ObservableConfig.from_annotation(None)

        assert settings.name is None
        assert settings.method_prefixes == ("set",)
        assert settings.old_value is True
        assert settings.prefix_match == PrefixMatch.FIRST

    def test_prefix_list(self):
        settings = ObservableConfig.from_annotation(
            {"method_prefixes": ["set", "update", "set"], "prefix_match": "all"}
        )

        assert settings.method_prefixes == ("set", "update")
        assert settings.prefix_match == PrefixMatch.ALL

    def test_empty_prefix_list_rejected(self):
        with pytest.raises(ConfigError):
            ObservableConfig.from_annotation({"method_prefixes": []})

    def test_bad_prefix_match_rejected(self):
        with pytest.raises(ConfigError, match="prefix_match"):
            ObservableConfig.from_annotation({"prefix_match": "some"})

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigError, match="oldValue"):
            ObservableConfig.from_annotation({"oldValue": False})


class TestObservableGenerator:
    """Test rendered observable subclasses."""

    def test_model_names(self, config, model_element):
        model = ObservableGenerator(config).build_model(model_element)

        assert model.class_name == "ObservableTestModel"
        assert model.parent == "com.example.TestModel"
        assert len(model.observed) == 1
        observed = model.observed[0]
        assert observed.listener_type == "StringListener"
        assert observed.field_name == "stringListeners"
        assert observed.callback_name == "stringChanged"
        assert observed.fire_name == "fireStringListener"
        assert observed.mutator.accessor.name == "getString"

    def test_class_and_fields(self, model_descriptor):
        code = squash(generate(model_descriptor))

        assert (
            '@javax.annotation.Generated("companion_gen.observable") '
            "public class ObservableTestModel extends com.example.TestModel {" in code
        )
        assert "private final java.util.List<StringListener> stringListeners;" in code
        assert "doSomething" not in code

    def test_constructor_initialises_listener_lists(self, model_descriptor):
        code = squash(generate(model_descriptor))

        assert (
            "public ObservableTestModel( final String test) { super(test); "
            "this.stringListeners = new java.util.ArrayList<>(); }" in code
        )

    def test_wrapped_mutator_with_old_value(self, model_descriptor):
        code = squash(generate(model_descriptor))

        assert (
            "public void setString( final String test) { "
            "final String oldValue = getString(); "
            "super.setString(test); "
            "final String newValue = getString(); "
            "fireStringListener(oldValue, newValue); }" in code
        )

    def test_listener_round_trip_with_old_value(self, model_descriptor):
        code = squash(generate(model_descriptor))

        assert (
            "private void fireStringListener( final String oldValue, final String newValue) "
            "{ for (final StringListener listener : stringListeners) "
            "{ listener.stringChanged(oldValue, newValue); } }" in code
        )
        assert (
            "public interface StringListener { "
            "void stringChanged( String oldValue, String newValue); }" in code
        )
        assert code.count("listener.stringChanged(") == 1

    def test_listener_round_trip_new_value_only(self, model_descriptor):
        model_descriptor["annotations"]["observable"] = {"old_value": False}

        code = squash(generate(model_descriptor))

        assert "oldValue" not in code
        assert (
            "super.setString(test); final String newValue = getString(); "
            "fireStringListener(newValue); }" in code
        )
        assert "void stringChanged( String newValue);" in code

    def test_listener_management(self, model_descriptor):
        code = squash(generate(model_descriptor))

        assert (
            "public void addStringListener( final StringListener listener) "
            "{ stringListeners.add(listener); }" in code
        )
        assert (
            "public void removeStringListener( final StringListener listener) "
            "{ stringListeners.remove(listener); }" in code
        )

    def test_member_order(self, model_descriptor):
        code = generate(model_descriptor)

        positions = [
            code.index("stringListeners;"),
            code.index("public ObservableTestModel("),
            code.index("public void setString("),
            code.index("public void addStringListener("),
            code.index("public void removeStringListener("),
            code.index("private void fireStringListener("),
            code.index("public interface StringListener"),
        ]
        assert positions == sorted(positions)

    def test_balanced_output(self, model_descriptor):
        code = generate(model_descriptor)

        assert code.count("{") == code.count("}")
        assert code.count("(") == code.count(")")

    def test_default_constructor_when_none_declared(self):
        descriptor = type_descriptor(
            "Settings",
            [
                method("getName", return_type="String"),
                method("setName", param("String", "name")),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert (
            "public ObservableSettings() { super(); "
            "this.nameListeners = new java.util.ArrayList<>(); }" in code
        )

    def test_boolean_accessor(self):
        descriptor = type_descriptor(
            "Toggle",
            [
                method("isEnabled", return_type="boolean"),
                method("setEnabled", param("boolean", "enabled")),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert "final boolean oldValue = isEnabled();" in code
        assert "void enabledChanged( boolean oldValue, boolean newValue);" in code

    def test_non_void_mutator_returns_result(self):
        descriptor = type_descriptor(
            "Builder",
            [
                method("getName", return_type="String"),
                method("setName", param("String", "name"), return_type="Builder"),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert (
            "public Builder setName( final String name) { "
            "final String oldValue = getName(); "
            "final Builder result = super.setName(name); "
            "final String newValue = getName(); "
            "fireNameListener(oldValue, newValue); "
            "return result; }" in code
        )

    def test_locals_avoid_parameter_name(self):
        descriptor = type_descriptor(
            "Counter",
            [
                method("getValue", return_type="int"),
                method("setValue", param("int", "newValue")),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert "super.setValue(newValue);" in code
        assert "final int newValue_1 = getValue();" in code
        assert "fireValueListener(oldValue, newValue_1);" in code

    def test_thrown_types_and_modifiers_preserved(self):
        descriptor = type_descriptor(
            "Store",
            [
                method("getData", return_type="byte[]"),
                method(
                    "setData",
                    param("byte[]", "data"),
                    modifiers=("protected", "synchronized"),
                    thrown=("java.io.IOException",),
                ),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert (
            "protected synchronized void setData( final byte[] data) throws java.io.IOException {"
            in code
        )

    def test_configured_name_and_prefixes(self):
        descriptor = type_descriptor(
            "Profile",
            [
                method("getAge", return_type="int"),
                method("updateAge", param("int", "age")),
                method("getName", return_type="String"),
                method("setName", param("String", "name")),
            ],
            observable={"name": "WatchedProfile", "method_prefixes": ["update"]},
        )

        code = squash(generate(descriptor))

        assert "public class WatchedProfile extends com.example.Profile {" in code
        assert "public void updateAge(" in code
        assert "setName" not in code

    def test_method_matching_several_prefixes_is_wrapped_once(self):
        descriptor = type_descriptor(
            "Profile",
            [
                method("getName", return_type="String"),
                method("getXName", return_type="String"),
                method("setXName", param("String", "name")),
            ],
            observable={"method_prefixes": ["set", "setX"], "prefix_match": "all"},
        )

        raw = generate(descriptor)
        code = squash(raw)

        assert raw.count("void setXName(") == 1
        assert (
            "public void setXName( final String name) { "
            "final String oldValue = getXName(); "
            "final String oldValue_1 = getName(); "
            "super.setXName(name); "
            "final String newValue = getXName(); "
            "final String newValue_1 = getName(); "
            "fireXNameListener(oldValue, newValue); "
            "fireNameListener(oldValue_1, newValue_1); }" in code
        )
        assert "public interface XNameListener" in code
        assert "public interface NameListener" in code

    def test_values_typed_by_accessor(self):
        descriptor = type_descriptor(
            "Counter",
            [
                method("getA", return_type="long"),
                method("setA", param("int", "a")),
            ],
            observable={},
        )

        code = squash(generate(descriptor))

        assert (
            "public void setA( final int a) { "
            "final long oldValue = getA(); "
            "super.setA(a); "
            "final long newValue = getA();" in code
        )
        assert "private void fireAListener( final long oldValue, final long newValue)" in code
        assert "void aChanged( long oldValue, long newValue);" in code
        assert "int oldValue" not in code

    def test_listener_list_implementation_option(self, model_descriptor):
        code = generate(
            model_descriptor,
            generator_options={"listener_list_impl": "java.util.concurrent.CopyOnWriteArrayList"},
        )

        assert "new java.util.concurrent.CopyOnWriteArrayList<>()" in code

    def test_no_mutators_warns(self):
        descriptor = type_descriptor(
            "Plain",
            [constructor(), method("getName", return_type="String")],
            observable={},
        )
        generator = ObservableGenerator(GeneratorConfig(add_comments=False))

        result = generate_code(generator, parse_type_element(descriptor))

        assert result.success
        assert any("nothing is observed" in w for w in result.warnings)


class TestObservableValidation:
    """Test rejection of mutators that cannot be wrapped."""

    def test_multi_parameter_mutator_rejected(self):
        descriptor = type_descriptor(
            "Point",
            [
                method("getLocation", return_type="int"),
                method("setLocation", param("int", "x"), param("int", "y")),
            ],
            observable={},
        )
        generator = ObservableGenerator(GeneratorConfig())

        with pytest.raises(ExtractionError, match="exactly one parameter"):
            generator.build_model(parse_type_element(descriptor))

    def test_missing_accessor_rejected(self):
        descriptor = type_descriptor(
            "WriteOnly",
            [method("setSecret", param("String", "secret"))],
            observable={},
        )
        generator = ObservableGenerator(GeneratorConfig())

        result = generate_code(generator, parse_type_element(descriptor))

        assert not result.success
        assert "getSecret" in result.error_message
        assert isinstance(result.exception, ExtractionError)
