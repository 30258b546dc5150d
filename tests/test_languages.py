"""Tests for the language registry."""

from __future__ import annotations

import pytest

from coderun_terminal.errors import InvalidLanguageError
from coderun_terminal.languages import (
    LANGUAGES,
    TEMPLATES,
    get_language,
    get_template,
    is_supported,
    language_for_path,
    list_languages,
)


class TestRegistry:
    def test_every_language_has_template(self):
        assert set(LANGUAGES) == set(TEMPLATES) == {"cpp", "c", "java", "py"}

    @pytest.mark.parametrize("language", ["cpp", "c", "java", "py"])
    def test_templates_print_hello_world(self, language):
        assert "Hello, World!" in get_template(language)

    def test_display_metadata(self):
        assert get_language("py").name == "Python"
        assert get_language("py").syntax == "python"
        assert get_language("cpp").name == "C++"

    def test_unknown_language(self):
        with pytest.raises(InvalidLanguageError) as exc_info:
            get_template("go")
        assert exc_info.value.language == "go"
        with pytest.raises(ValueError):
            get_language("go")

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            TEMPLATES["py"] = "print('changed')"  # type: ignore[index]

    def test_is_supported(self):
        assert is_supported("java")
        assert not is_supported("Java")

    def test_list_languages_order(self):
        assert [lang.id for lang in list_languages()] == ["cpp", "c", "java", "py"]


class TestLanguageForPath:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("main.cpp", "cpp"),
            ("main.cc", "cpp"),
            ("hello.c", "c"),
            ("Main.java", "java"),
            ("script.PY", "py"),
            ("notes.txt", None),
            ("Makefile", None),
        ],
    )
    def test_suffixes(self, path, expected):
        assert language_for_path(path) == expected
