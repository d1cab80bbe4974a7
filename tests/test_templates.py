import pytest

from sqlift.codegen.core.templates import TemplateEngine, TemplateError


@pytest.fixture
def engine(tmp_path):
    (tmp_path / "hello.j2").write_text(
        "class {{ name }}:\n{% for field in fields %}\n    {{ field }}: int\n{% endfor %}\n"
    )
    (tmp_path / "strict.j2").write_text("{{ missing }}")
    return TemplateEngine(tmp_path)


def test_render_trims_blocks(engine):
    code = engine.render_template("hello.j2", {"name": "OrderItem", "fields": ["id", "qty"]})
    assert code == "class OrderItem:\n    id: int\n    qty: int\n"


def test_no_custom_filters(engine, tmp_path):
    (tmp_path / "filtered.j2").write_text("{{ name | pascal_case }}")
    with pytest.raises(TemplateError, match="filtered.j2"):
        engine.render_template("filtered.j2", {"name": "order_items"})


def test_missing_directory(tmp_path):
    with pytest.raises(TemplateError, match="not found"):
        TemplateEngine(tmp_path / "nope")


def test_missing_template(engine):
    with pytest.raises(TemplateError, match="Template not found: other.j2"):
        engine.render_template("other.j2", {})


def test_undefined_variable_fails(engine):
    with pytest.raises(TemplateError, match="strict.j2"):
        engine.render_template("strict.j2", {})


def test_template_listing(engine):
    assert engine.template_exists("hello.j2")
    assert not engine.template_exists("other.j2")
    assert engine.list_templates() == ["hello.j2", "strict.j2"]
