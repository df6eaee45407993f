"""
Variable storage for running My-BASIC programs.

Names are case-insensitive and stored uppercased. A name ending in ``$`` is
a string variable, every other name is numeric. Reading a variable that was
never assigned is not an error: it yields ``""`` for string variables and
``0`` for numeric ones, as classic BASIC does.
"""

Value = str | float


def canonical_name(name: str) -> str:
    return name.upper()


def default_value(name: str) -> Value:
    return "" if name.endswith("$") else 0.0


class Environment:
    """Mapping of uppercased variable names to their current value."""

    def __init__(self) -> None:
        self._variables: dict[str, Value] = {}

    def set(self, name: str, value: Value) -> None:
        """Bind ``name``. Numbers are stored as floats."""
        if not isinstance(value, str):
            value = float(value)
        self._variables[canonical_name(name)] = value

    def get(self, name: str) -> Value:
        key = canonical_name(name)
        if key not in self._variables:
            return default_value(key)
        return self._variables[key]

    def clear(self) -> None:
        self._variables.clear()

    def snapshot(self) -> dict[str, Value]:
        """Returns a copy of the current bindings."""
        return dict(self._variables)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._variables

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"Environment({self._variables!r})"


__all__ = ["Environment", "Value", "canonical_name", "default_value"]
