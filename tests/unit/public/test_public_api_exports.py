from __future__ import annotations

import inspect

import autoreg


def test_all_exports_resolve() -> None:
    missing = [name for name in autoreg.__all__ if not hasattr(autoreg, name)]

    assert missing == []
    assert sorted(autoreg.__all__) == autoreg.__all__


def test_top_level_exported_api_objects_have_docstrings() -> None:
    missing_object_docstrings = [
        export_name
        for export_name in sorted(autoreg.__all__)
        if not inspect.getdoc(getattr(autoreg, export_name))
    ]

    if missing_object_docstrings:
        raise AssertionError(
            "missing object docstrings: " + ", ".join(missing_object_docstrings),
        )


def test_exceptions_share_base_class() -> None:
    for name in autoreg.__all__:
        exported = getattr(autoreg, name)
        if inspect.isclass(exported) and issubclass(exported, Exception):
            assert issubclass(exported, autoreg.AutoregError)
