import pytest

from sqlift.codegen.languages.python import PythonGenerator
from sqlift.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    is_language_supported,
    list_supported_languages,
)


class TestGlobalRegistry:
    def test_python_registered_with_alias(self):
        assert list_supported_languages() == ["python"]
        assert is_language_supported("python")
        assert is_language_supported("PY")
        assert not is_language_supported("go")

    def test_alias_resolves_to_same_class(self):
        registry = get_registry()
        assert registry.get_generator_class("py") is PythonGenerator
        assert registry.resolve("Py") == "python"

    def test_get_generator_builds_new_instances(self):
        first = get_generator("python")
        second = get_generator("py")

        assert isinstance(first, PythonGenerator)
        assert first is not second
        assert first.template_engine is not second.template_engine

    def test_language_info(self):
        info = get_language_info("py")

        assert info["name"] == "python"
        assert info["file_extension"] == ".py"
        assert info["aliases"] == ["py"]
        assert info["class"] == "PythonGenerator"
        assert "standalone.py.j2" in info["templates"]

    def test_unknown_language(self):
        with pytest.raises(RegistryError, match="Available: python"):
            get_generator("cobol")


class TestGeneratorRegistry:
    def test_rejects_non_generator(self):
        with pytest.raises(RegistryError):
            GeneratorRegistry().register("bad", dict)

    def test_alias_conflict(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py"])

        with pytest.raises(RegistryError, match="already points to"):
            registry.register("python3", PythonGenerator, aliases=["py"])

    def test_alias_cannot_shadow_primary(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator)

        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("other", PythonGenerator, aliases=["python"])

    def test_duplicate_registration_ignored(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py"])
        registry.register("python", PythonGenerator, aliases=["py"])
        assert registry.list_languages() == ["python"]

    def test_unregister_removes_aliases(self):
        registry = GeneratorRegistry()
        registry.register("python", PythonGenerator, aliases=["py"])
        registry.unregister("python")

        assert not registry.is_supported("python")
        assert not registry.is_supported("py")
