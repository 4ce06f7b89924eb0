"""Runtime callable backing generated template resources."""

from typing import Any

from rescodegen.errors import TemplateArityError, TemplateTypeMismatchError

# Accepted spellings of template parameter types, mapped to canonical names.
PARAM_TYPES: dict[str, str] = {
    "string": "string",
    "str": "string",
    "integer": "integer",
    "int": "integer",
    "float": "float",
    "boolean": "boolean",
    "bool": "boolean",
}


def canonical_param_type(type_name: str) -> str | None:
    """Return the canonical parameter type, or None when unsupported."""
    return PARAM_TYPES.get(str(type_name).strip().lower())


def _matches(value: Any, type_name: str) -> bool:
    # bool is a subclass of int but never a number here.
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "boolean":
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if type_name == "integer":
        return isinstance(value, int)
    return isinstance(value, int | float)


class TemplateFunction:
    """A parameterized string definition invoked with positional arguments.

    Arguments must match the declared parameters in count and type, in
    declaration order.
    """

    def __init__(
        self, name: str, params: tuple[tuple[str, str], ...], format_string: str
    ) -> None:
        """Store the declaration; ``params`` holds (name, canonical type) pairs."""
        self.__name__ = name
        self.params = tuple(params)
        self.format_string = format_string

    def __call__(self, *args: Any) -> str:
        """Render the template with ``args``."""
        if len(args) != len(self.params):
            msg = (
                f"{self.__name__}() takes {len(self.params)} argument(s) "
                f"but {len(args)} were given"
            )
            raise TemplateArityError(msg)
        for (param, type_name), value in zip(self.params, args, strict=True):
            if not _matches(value, type_name):
                msg = (
                    f"{self.__name__}(): parameter '{param}' expects {type_name}, "
                    f"got {type(value).__name__}"
                )
                raise TemplateTypeMismatchError(msg)
        names = [param for param, _ in self.params]
        return self.format_string.format(**dict(zip(names, args, strict=True)))

    def __repr__(self) -> str:
        """Return a constructor expression."""
        return (
            f"TemplateFunction({self.__name__!r}, {self.params!r}, "
            f"{self.format_string!r})"
        )
