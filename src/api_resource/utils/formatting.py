import re
import typing

_word_separators = re.compile(r"[-_\s]+")
_camel_hump = re.compile(r"(?<=[a-z0-9])([A-Z])")


def studly(value: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _word_separators.split(value))


def camel(value: str) -> str:
    """
    Converts snake_case or kebab-case into camelCase.  Dots are left intact, so that
    ``"author.user_profile"`` becomes ``"author.userProfile"``.
    """
    s = studly(value)
    return s[:1].lower() + s[1:]


def snake(value: str) -> str:
    return _camel_hump.sub(r"_\1", value).replace("-", "_").lower()


def identity(value: str) -> str:
    return value


NAMING_STYLES: typing.Mapping[str, typing.Callable[[str], str]] = {
    "camel": camel,
    "snake": snake,
    "none": identity,
}
