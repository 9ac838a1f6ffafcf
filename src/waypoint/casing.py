"""Name-case conversion between wire names and code identifiers.

``camelize`` turns ``user-profile`` into ``UserProfile`` for controller and
method names.  ``snake`` turns a handler parameter such as ``userId`` into the
request key ``user_id``.
"""

import re

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")


def camelize(words: str, separators: str | tuple[str, ...] | list[str] = ("-", "_")) -> str:
    """Join separator-delimited words into an upper camel-case identifier.

    Each separator becomes a word break, the first letter of every word is
    upper-cased (the rest are left as they are), and the breaks are removed::

        camelize("get_info")        -> "GetInfo"
        camelize("user-profile")    -> "UserProfile"
        camelize("loadUser", "-")   -> "LoadUser"
    """
    if isinstance(separators, str):
        separators = (separators,)
    for sep in separators:
        words = words.replace(sep, " ")
    return "".join(word[:1].upper() + word[1:] for word in words.split(" "))


def lcfirst(words: str) -> str:
    """Lower-case only the first character."""
    return words[:1].lower() + words[1:]


def snake(words: str, separator: str = "_") -> str:
    """Split camel-case at lower/upper boundaries and lower-case the result.

    Only a lower-case letter immediately followed by an upper-case letter is a
    boundary, so runs of capitals stay together::

        snake("userId")     -> "user_id"
        snake("getHTTPCode") -> "get_httpcode"
    """
    return _LOWER_UPPER.sub(lambda m: m.group(1) + separator + m.group(2), words).lower()
