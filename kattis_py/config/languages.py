"""Languages accepted by the judge and the aliases used in kattis.yml."""

from typing import Dict

from ..errors import ConfigurationError


# Canonical name (as sent to the judge) -> accepted aliases, lowercase.
LANGUAGES: Dict[str, tuple] = {
    "C": ("c",),
    "C#": ("c#", "csharp", "cs"),
    "C++": ("c++", "cpp", "cxx", "cc"),
    "Cobol": ("cobol",),
    "Go": ("go", "golang"),
    "Haskell": ("haskell", "hs"),
    "Java": ("java",),
    "JavaScript (Node.js)": ("node.js", "nodejs", "node", "js", "javascript"),
    "JavaScript (SpiderMonkey)": ("spidermonkey", "spider monkey"),
    "Kotlin": ("kotlin", "kt"),
    "Common Lisp": ("common lisp", "commonlisp", "lisp"),
    "Objective-C": ("objective-c", "objectivec", "objc"),
    "OCaml": ("ocaml",),
    "Pascal": ("pascal",),
    "PHP": ("php",),
    "Prolog": ("prolog",),
    "Python 2": ("python 2", "python2", "py2"),
    "Python 3": ("python 3", "python3", "py3", "python", "py"),
    "Ruby": ("ruby", "rb"),
    "Rust": ("rust", "rs"),
}

# Languages whose submissions need a main class to be runnable.
MAINCLASS_LANGUAGES = frozenset({"Java", "Kotlin"})

_ALIASES = {
    alias: name for name, aliases in LANGUAGES.items() for alias in aliases
}


def normalize_language(text: str) -> str:
    """Return the judge's name for a language given any known alias."""
    key = " ".join(str(text).split()).lower()
    if key in _ALIASES:
        return _ALIASES[key]
    raise ConfigurationError(f"Unknown language: {text!r}")


def needs_mainclass(language: str) -> bool:
    return language in MAINCLASS_LANGUAGES
