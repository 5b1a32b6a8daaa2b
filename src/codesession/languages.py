"""Registry of languages the execution backend can run.

Each entry pairs an identifier used throughout the session (and in storage
keys) with the Piston runtime descriptor to submit and a little display
metadata for the UI layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class Runtime:
    """Runtime descriptor understood by the execution backend."""

    language: str
    version: str


@dataclass(frozen=True)
class LanguageSpec:
    id: str
    label: str
    runtime: Runtime
    editor_language: str
    default_code: str = ""


LANGUAGES: Mapping[str, LanguageSpec] = {
    spec.id: spec
    for spec in (
        LanguageSpec(
            id="javascript",
            label="JavaScript",
            runtime=Runtime("javascript", "18.15.0"),
            editor_language="javascript",
            default_code='console.log("Hello, World!");\n',
        ),
        LanguageSpec(
            id="typescript",
            label="TypeScript",
            runtime=Runtime("typescript", "5.0.3"),
            editor_language="typescript",
            default_code='const greeting: string = "Hello, World!";\nconsole.log(greeting);\n',
        ),
        LanguageSpec(
            id="python",
            label="Python",
            runtime=Runtime("python", "3.10.0"),
            editor_language="python",
            default_code='print("Hello, World!")\n',
        ),
        LanguageSpec(
            id="java",
            label="Java",
            runtime=Runtime("java", "15.0.2"),
            editor_language="java",
            default_code=(
                "public class Main {\n"
                "    public static void main(String[] args) {\n"
                '        System.out.println("Hello, World!");\n'
                "    }\n"
                "}\n"
            ),
        ),
        LanguageSpec(
            id="go",
            label="Go",
            runtime=Runtime("go", "1.16.2"),
            editor_language="go",
            default_code='package main\n\nimport "fmt"\n\nfunc main() {\n    fmt.Println("Hello, World!")\n}\n',
        ),
        LanguageSpec(
            id="rust",
            label="Rust",
            runtime=Runtime("rust", "1.68.2"),
            editor_language="rust",
            default_code='fn main() {\n    println!("Hello, World!");\n}\n',
        ),
        LanguageSpec(
            id="cpp",
            label="C++",
            runtime=Runtime("cpp", "10.2.0"),
            editor_language="cpp",
            default_code=(
                "#include <iostream>\n\n"
                "int main() {\n"
                '    std::cout << "Hello, World!" << std::endl;\n'
                "    return 0;\n"
                "}\n"
            ),
        ),
        LanguageSpec(
            id="csharp",
            label="C#",
            runtime=Runtime("csharp", "6.12.0"),
            editor_language="csharp",
            default_code=(
                "using System;\n\n"
                "class Program {\n"
                "    static void Main() {\n"
                '        Console.WriteLine("Hello, World!");\n'
                "    }\n"
                "}\n"
            ),
        ),
        LanguageSpec(
            id="ruby",
            label="Ruby",
            runtime=Runtime("ruby", "3.0.1"),
            editor_language="ruby",
            default_code='puts "Hello, World!"\n',
        ),
        LanguageSpec(
            id="swift",
            label="Swift",
            runtime=Runtime("swift", "5.3.3"),
            editor_language="swift",
            default_code='print("Hello, World!")\n',
        ),
    )
}


def get_language(language: str, registry: Mapping[str, LanguageSpec] = LANGUAGES) -> LanguageSpec | None:
    return registry.get(language)


def get_runtime(language: str, registry: Mapping[str, LanguageSpec] = LANGUAGES) -> Runtime | None:
    """Return the runtime descriptor for ``language``, or ``None`` if unknown."""
    spec = registry.get(language)
    return spec.runtime if spec is not None else None


def is_supported(language: str, registry: Mapping[str, LanguageSpec] = LANGUAGES) -> bool:
    return language in registry
