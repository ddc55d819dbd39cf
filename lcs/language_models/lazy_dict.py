"""
The utility class `LazyLoadingDict` stores memoized objects produced
by a factory function from a definition given as key.

The package uses it to keep one tool object per tool configuration:
the key is a frozen (hashable) settings object, and the value is
created by the factory the first time the key is looked up. Invalid
definitions raise at lookup, through the pydantic validation of the
key or through the factory function itself.
"""

from collections.abc import Callable
from typing import TypeVar

# ValueT is the parameter for the stored valued, KeyT for the keys.
ValueT = TypeVar('ValueT')
KeyT = TypeVar('KeyT')


class LazyLoadingDict(dict[KeyT, ValueT]):
    """A lazy dictionary class with memoized objects of type ValueT.

    Example:
    ```python
    from pydantic import BaseModel, ConfigDict

    class ToolSpec(BaseModel):
        name: str
        max_results: int = 3

        # required to use instances as keys
        model_config = ConfigDict(frozen=True)

    def _create_tool(spec: ToolSpec) -> BaseTool:
        ...

    tools = LazyLoadingDict(_create_tool)
    search = tools[ToolSpec(name="search")]   # created
    search = tools[ToolSpec(name="search")]   # memoized
    ```

    It is also possible to assign to the dictionary directly, thus
    bypassing the factory function.

    Expected behaviour: may raise ValidationError and ValueErrors.
    """

    def __init__(
        self,
        key_creator_func: Callable[[KeyT], ValueT],
        destructor_func: Callable[[ValueT], None] | None = None,
    ):
        super().__init__()
        self._key_creator_func = key_creator_func
        self._destructor_func = destructor_func

    def _destroy_value(self, value: ValueT) -> None:
        if self._destructor_func:
            self._destructor_func(value)
        elif hasattr(value, "close") and callable(value.close):  # type: ignore
            value.close()  # type: ignore

    def __getitem__(self, key: KeyT) -> ValueT:
        if key in self:
            return super().__getitem__(key)

        value: ValueT = self._key_creator_func(key)
        super().__setitem__(key, value)
        return value

    def __setitem__(self, key: KeyT, value: ValueT) -> None:
        """Allow direct setting of key/value pairs, bypassing the
        factory function for the given key.

        Raises:
            ValueError: If the key already exists in the dictionary.
        """
        if key in self:
            raise ValueError(
                f"Key '{key}' already exists. Delete it first to overwrite."
            )
        super().__setitem__(key, value)

    def __delitem__(self, key: KeyT) -> None:
        if key in self:
            self._destroy_value(super().__getitem__(key))
        super().__delitem__(key)

    def clear(self) -> None:
        for value in list(self.values()):
            self._destroy_value(value)
        super().clear()
