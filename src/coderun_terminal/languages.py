"""Supported languages and their starter templates."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from coderun_terminal.errors import InvalidLanguageError


@dataclass(frozen=True)
class LanguageConfig:
    """Display metadata for one supported language."""

    id: str
    name: str
    syntax: str
    extension: str


LANGUAGES: MappingProxyType[str, LanguageConfig] = MappingProxyType(
    {
        "cpp": LanguageConfig(id="cpp", name="C++", syntax="cpp", extension=".cpp"),
        "c": LanguageConfig(id="c", name="C", syntax="c", extension=".c"),
        "java": LanguageConfig(id="java", name="Java", syntax="java", extension=".java"),
        "py": LanguageConfig(id="py", name="Python", syntax="python", extension=".py"),
    }
)

TEMPLATES: MappingProxyType[str, str] = MappingProxyType(
    {
        "cpp": (
            "#include <iostream>\n"
            "using namespace std;\n"
            "\n"
            "int main() {\n"
            '    cout << "Hello, World!" << endl;\n'
            "    return 0;\n"
            "}"
        ),
        "c": (
            "#include <stdio.h>\n"
            "\n"
            "int main() {\n"
            '    printf("Hello, World!\\n");\n'
            "    return 0;\n"
            "}"
        ),
        "java": (
            "public class Main {\n"
            "    public static void main(String[] args) {\n"
            '        System.out.println("Hello, World!");\n'
            "    }\n"
            "}"
        ),
        "py": 'print("Hello, World!")',
    }
)

# Extra suffixes accepted when guessing a language from a file name
_EXTENSION_ALIASES = {".cc": "cpp", ".cxx": "cpp", ".hpp": "cpp", ".h": "c"}


def is_supported(language: str) -> bool:
    return language in LANGUAGES


def get_language(language: str) -> LanguageConfig:
    """Return display metadata for a language id."""
    try:
        return LANGUAGES[language]
    except KeyError:
        raise InvalidLanguageError(language) from None


def get_template(language: str) -> str:
    """Return the default source snippet for a language id."""
    try:
        return TEMPLATES[language]
    except KeyError:
        raise InvalidLanguageError(language) from None


def list_languages() -> list[LanguageConfig]:
    return list(LANGUAGES.values())


def language_for_path(path: str | Path) -> str | None:
    """Guess the language id from a file suffix, or None if unknown."""
    suffix = Path(path).suffix.lower()
    for lang in LANGUAGES.values():
        if lang.extension == suffix:
            return lang.id
    return _EXTENSION_ALIASES.get(suffix)
