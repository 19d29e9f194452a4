"""Recipes: what the container stores for each registered key.

A recipe is either a :class:`Value` (an already-built object returned as-is)
or a :class:`Producer` (a callable invoked with the container to build the
object). Keeping the two explicit means the container never has to guess
whether a stored object is "callable".
"""

from dataclasses import dataclass
from typing import Any, Callable, Union

ProducerFn = Callable[[Any], Any]


@dataclass(frozen=True)
class Value:
    """An already-built service.

    Attributes:
        value: The object handed out by ``get``.
    """
    value: Any

    @property
    def description(self) -> str:
        return f"value {type(self.value).__name__}"

    def produce(self, container: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class Producer:
    """A lazily invoked builder.

    Attributes:
        fn: One-argument callable receiving the container.
        description: Label used in logs and ``repr``.
    """
    fn: ProducerFn
    description: str = "producer"

    def produce(self, container: Any) -> Any:
        return self.fn(container)


Recipe = Union[Value, Producer]
