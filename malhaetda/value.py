import abc
import math
from dataclasses import dataclass
from typing import Callable, Optional


class Value(abc.ABC):
    @classmethod
    @abc.abstractmethod
    def type_name(cls) -> str:
        ...


def type_name_of(value: Optional[Value]) -> str:
    # faulted operator applications leave no value behind
    return "Nothing" if value is None else value.type_name()


BinaryOperationImpl = Callable[[Value, Value], Value]


@dataclass(frozen=True)
class Number(Value):
    v: float

    @classmethod
    def type_name(cls) -> str:
        return "Number"

    def __str__(self) -> str:
        negative_zero = self.v == 0 and math.copysign(1.0, self.v) < 0
        if math.isfinite(self.v) and self.v.is_integer() and abs(self.v) < 1e16 and not negative_zero:
            return str(int(self.v))
        return repr(self.v)


@dataclass(frozen=True)
class Text(Value):
    v: str

    @classmethod
    def type_name(cls) -> str:
        return "Text"

    def __str__(self) -> str:
        return self.v
