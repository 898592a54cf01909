from __future__ import annotations

import string

# Shown to users as the always-allowed character class.
BASE_CHARACTERS = "-a-zA-Z0-9._ "

BASE_ALLOWED = frozenset(string.ascii_letters + string.digits + "-._ ")

TYPOGRAPHIC_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("–", "-"),  # en dash
    ("—", "-"),  # em dash
    ("’", "'"),
    ("“", '"'),
    ("”", '"'),
)

_STRIPPED_FROM_ADDITIONAL = frozenset("[]")

# Unicode spaces, line terminators and the BOM; \x1c-\x1f are not trimmed.
TRIMMED_WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def allowed_characters(additional: str = "") -> frozenset[str]:
    """
    Return the effective allow-list: the base set plus every literal character
    of `additional` except square brackets.

    Example:
        >>> "(" in allowed_characters("(")
        True
        >>> "[" in allowed_characters("[")
        False
    """
    extra = {ch for ch in additional if ch not in _STRIPPED_FROM_ADDITIONAL}
    return BASE_ALLOWED | extra


def normalize_typography(name: str) -> str:
    for variant, replacement in TYPOGRAPHIC_REPLACEMENTS:
        name = name.replace(variant, replacement)
    return name


def get_safe_name(raw_name: str, additional: str = "") -> str:
    """
    Map a file name onto the allow-list.

    Dash, apostrophe and quote variants are first folded to ASCII; every
    remaining code point outside the allow-list then becomes one hyphen and
    outer whitespace is trimmed.

    Examples:
        >>> get_safe_name("This is not valid?.md")
        'This is not valid-.md'
        >>> get_safe_name("Fancy (exotic) Ž?.md", "(Ž")
        'Fancy (exotic- Ž-.md'
    """
    allowed = allowed_characters(additional)
    normalized = normalize_typography(raw_name)
    replaced = "".join(ch if ch in allowed else "-" for ch in normalized)
    return replaced.strip(TRIMMED_WHITESPACE)


def is_safe_name(name: str, additional: str = "") -> bool:
    return get_safe_name(name, additional) == name
