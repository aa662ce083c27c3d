"""Tests for naming utilities and header templates."""

import pytest

from companion_gen.codegen.core.naming import (
    NameSanitizer,
    box_type,
    capitalize,
    create_java_sanitizer,
    decapitalize,
    fire_method_name,
    is_java_identifier,
    is_qualified_name,
    listener_callback_name,
    listener_field_name,
    listener_interface_name,
    raw_type,
    strip_prefix,
)
from companion_gen.codegen.core.templates import (
    TemplateEngine,
    TemplateError,
    create_template_engine,
)


class TestIdentifiers:
    @pytest.mark.parametrize("name", ["foo", "_foo", "$foo", "Foo1", "camelCase"])
    def test_valid(self, name):
        assert is_java_identifier(name)

    @pytest.mark.parametrize("name", ["", "1foo", "foo-bar", "class", "null", "a.b"])
    def test_invalid(self, name):
        assert not is_java_identifier(name)

    def test_qualified_names(self):
        assert is_qualified_name("com.example.Account")
        assert not is_qualified_name("com..example")
        assert not is_qualified_name("com.package")


class TestCase:
    def test_capitalize(self):
        assert capitalize("string") == "String"
        assert capitalize("") == ""

    def test_decapitalize(self):
        assert decapitalize("String") == "string"
        assert decapitalize("URL") == "URL"
        assert decapitalize("X") == "x"

    def test_subject_names(self):
        assert listener_interface_name("String") == "StringListener"
        assert listener_field_name("String") == "stringListeners"
        assert listener_callback_name("String") == "stringChanged"
        assert fire_method_name("String") == "fireStringListener"

    def test_strip_prefix(self):
        assert strip_prefix("setName", "set") == "Name"
        assert strip_prefix("set", "set") is None
        assert strip_prefix("getName", "set") is None


class TestTypes:
    def test_box_type(self):
        assert box_type("int") == "java.lang.Integer"
        assert box_type("char") == "java.lang.Character"
        assert box_type("String") == "String"

    def test_raw_type(self):
        assert raw_type("java.util.Map<String, List<Integer>>") == "java.util.Map"
        assert raw_type("String") == "String"


class TestNameSanitizer:
    def test_unused_name_kept(self):
        assert create_java_sanitizer().sanitize_name("value") == "value"

    def test_every_call_allocates_a_new_name(self):
        sanitizer = create_java_sanitizer()

        names = [sanitizer.sanitize_name("value") for _ in range(3)]

        assert names == ["value", "value_1", "value_2"]

    def test_seeded_names_avoided(self):
        sanitizer = create_java_sanitizer(["newValue"])

        assert sanitizer.sanitize_name("newValue") == "newValue_1"
        assert sanitizer.is_used("newValue_1")

    def test_reserved_words_suffixed(self):
        assert create_java_sanitizer().sanitize_name("class") == "class_"

    def test_empty_suffix(self):
        sanitizer = NameSanitizer()
        sanitizer.add_used_name("id")

        assert sanitizer.sanitize_name("id", suffix_on_conflict="") == "id1"

    def test_reset(self):
        sanitizer = create_java_sanitizer(["a"])
        sanitizer.reset_used_names()

        assert sanitizer.sanitize_name("a") == "a"


class TestTemplates:
    def test_default_header(self):
        engine = create_template_engine()

        text = engine.render_template(
            "header", {"generator": "companion_gen.factory", "source": "com.example.A"}
        )

        assert text.startswith("Generated by companion_gen.factory from com.example.A.")

    def test_custom_header_with_filters(self):
        engine = create_template_engine("{{ source | simple_name | decapitalize }}")

        assert engine.render_template("header", {"source": "com.example.Account"}) == "account"

    def test_missing_variable_is_an_error(self):
        engine = create_template_engine("{{ nope }}")

        with pytest.raises(TemplateError):
            engine.render_template("header", {})

    def test_syntax_error(self):
        with pytest.raises(TemplateError):
            TemplateEngine().render_string("{% if %}", {})

    def test_add_template(self):
        engine = TemplateEngine()
        engine.add_template("greeting", "Hello {{ name | capitalize_first }}")

        assert engine.template_exists("greeting")
        assert engine.render_template("greeting", {"name": "world"}) == "Hello World"
