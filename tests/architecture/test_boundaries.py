from pytest_archon import archrule

COMPILATION_MODULES = (
    "cqrs_ddd_jsonapi.tokenizer",
    "cqrs_ddd_jsonapi.paths",
    "cqrs_ddd_jsonapi.filters",
    "cqrs_ddd_jsonapi.sorting",
    "cqrs_ddd_jsonapi.projection",
    "cqrs_ddd_jsonapi.includes",
    "cqrs_ddd_jsonapi.pagination",
    "cqrs_ddd_jsonapi.params",
    "cqrs_ddd_jsonapi.config",
    "cqrs_ddd_jsonapi.naming",
    "cqrs_ddd_jsonapi.ports",
    "cqrs_ddd_jsonapi.exceptions",
)


def test_compilation_is_store_independent() -> None:
    """
    Parameter compilation is pure: it must not import SQLAlchemy or the
    store adapter. Every compilation module is matched, so checking direct
    imports covers the whole group.
    """
    rule = archrule("compilation_is_store_independent")
    for module in COMPILATION_MODULES:
        rule = rule.match(module)
    (
        rule.should_not_import("sqlalchemy*")
        .should_not_import("cqrs_ddd_jsonapi.sqlalchemy*")
        .should_not_import("cqrs_ddd_jsonapi.pipeline")
        .check("cqrs_ddd_jsonapi", only_direct_imports=True)
    )


def test_store_adapter_layering() -> None:
    """
    The SQLAlchemy adapter sits below the pipeline and plugin.
    """
    (
        archrule("store_adapter_layering")
        .match("cqrs_ddd_jsonapi.sqlalchemy*")
        .should_not_import("cqrs_ddd_jsonapi.pipeline")
        .should_not_import("cqrs_ddd_jsonapi.plugin")
        .check("cqrs_ddd_jsonapi", only_direct_imports=True)
    )


def test_pipeline_does_not_import_plugin() -> None:
    """
    The plugin builds queries; queries never reach back to the plugin.
    """
    (
        archrule("pipeline_below_plugin")
        .match("cqrs_ddd_jsonapi.pipeline")
        .should_not_import("cqrs_ddd_jsonapi.plugin")
        .check("cqrs_ddd_jsonapi", only_direct_imports=True)
    )
