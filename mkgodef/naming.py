"""
Identifier transformation from C names to Go names.

All functions are pure: the same input always yields the same output, so
the deduplication in the generators is deterministic.
"""

from __future__ import annotations

# Prefix for identifiers that would otherwise start with a digit
DIGIT_ESCAPE = "X_"

# Letter used by cgo to export identifiers starting with "_"
UNDERSCORE_ESCAPE = "X"

# Go keywords and predeclared identifiers
GO_RESERVED = frozenset({
    # Keywords
    "break", "case", "chan", "const", "continue", "default", "defer",
    "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
    "interface", "map", "package", "range", "return", "select", "struct",
    "switch", "type", "var",

    # Predeclared types
    "any", "bool", "byte", "comparable", "complex64", "complex128",
    "error", "float32", "float64", "int", "int8", "int16", "int32",
    "int64", "rune", "string", "uint", "uint8", "uint16", "uint32",
    "uint64", "uintptr",

    # Predeclared constants and zero value
    "true", "false", "iota", "nil",

    # Builtin functions
    "append", "cap", "clear", "close", "complex", "copy", "delete",
    "imag", "len", "make", "max", "min", "new", "panic", "print",
    "println", "real", "recover",
})


def _is_lower(c: str) -> bool:
    return "a" <= c <= "z"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def go_camel_case(s: str) -> str:
    """
    Camel-case a C identifier for use as a Go identifier.

    Words are delimited by "." and "_" and by the start of a letter run;
    digit runs are copied as they are. Each word starts with an upper
    case letter.

    Rules:
    - "." followed by a lowercase letter is dropped
    - any other "." becomes "_"
    - "_" at the start, or right after ".", is dropped
    - "_" followed by a lowercase letter is dropped
    """
    out = []
    i = 0
    n = len(s)

    while i < n:
        c = s[i]

        if c == "." and i + 1 < n and _is_lower(s[i + 1]):
            pass
        elif c == ".":
            out.append("_")
        elif c == "_" and (i == 0 or s[i - 1] == "."):
            pass
        elif c == "_" and i + 1 < n and _is_lower(s[i + 1]):
            pass
        elif _is_digit(c):
            out.append(c)
        else:
            # Assume a letter; anything else is a bogus identifier anyway
            if _is_lower(c):
                c = c.upper()
            out.append(c)

            # Accept the lowercase run that follows
            while i + 1 < n and _is_lower(s[i + 1]):
                i += 1
                out.append(s[i])

        i += 1

    return "".join(out)


def upper_camel_case(s: str) -> str:
    """
    Convert a C name to an exported Go name.

    Examples:
        >>> upper_camel_case("my_struct")
        'MyStruct'
        >>> upper_camel_case("COLOR")
        'Color'
        >>> upper_camel_case("123foo")
        'X_123Foo'
        >>> upper_camel_case("_foo")
        'XFoo'
    """
    if s.startswith("_"):
        # Keep "_foo" and "foo" apart
        return UNDERSCORE_ESCAPE + go_camel_case(s.lower())

    s = go_camel_case(s.lower())
    if not s:
        return s

    if _is_digit(s[0]):
        return DIGIT_ESCAPE + s

    return s[0].upper() + s[1:]


def lower_camel_case(s: str) -> str:
    """Convert a C name to an unexported Go name (parameters)."""
    s = go_camel_case(s)
    if not s:
        return s

    if _is_digit(s[0]):
        return DIGIT_ESCAPE + s

    return s[0].lower() + s[1:]


def export(s: str) -> str:
    """
    Export a C name the way cgo does.

    Only the first character changes: a leading "_" is escaped with "X",
    a leading digit with "X_", anything else is upper-cased.
    """
    if not s:
        return s

    first = s[0]
    if first == "_":
        return UNDERSCORE_ESCAPE + s
    if _is_digit(first):
        return DIGIT_ESCAPE + s

    return first.upper() + s[1:]


def guard_reserved(name: str, reserved: frozenset[str] = GO_RESERVED) -> str:
    """Append "_" until name no longer shadows a reserved Go identifier."""
    while name in reserved:
        name += "_"
    return name
