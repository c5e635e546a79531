import abc
from typing import Any, Optional

import pandas as pd

from .utils import frozen_dataclass


class Expression(abc.ABC):
    label: str

    def columns(self) -> set[str]:
        return set()

    @abc.abstractmethod
    def evaluate(self, data: pd.DataFrame) -> pd.Series:
        pass


@frozen_dataclass
class Column(Expression):
    name: str

    @property
    def label(self) -> str:
        return self.name

    def columns(self) -> set[str]:
        return {self.name}

    def evaluate(self, data: pd.DataFrame) -> pd.Series:
        return data[self.name].reset_index(drop=True)


@frozen_dataclass
class Literal(Expression):
    value: Any

    @property
    def label(self) -> str:
        return str(self.value)

    def evaluate(self, data: pd.DataFrame) -> pd.Series:
        # a constant variable, not a style: it gets a scale and a legend like any column
        return pd.Series([self.value] * len(data))


def col(name: str) -> Column:
    return Column(name)


def literal(value: Any) -> Literal:
    return Literal(value)


Aesthetic = dict[str, Expression]

ALIASES = {"colour": "color", "linewidth": "size"}


def as_expression(value: Any) -> Expression:
    if isinstance(value, Expression):
        return value
    if isinstance(value, str):
        return Column(value)
    return Literal(value)


def aes(x: Any = None, y: Any = None, **kwargs: Any) -> Aesthetic:
    return {
        **({"x": as_expression(x)} if x is not None else {}),
        **({"y": as_expression(y)} if y is not None else {}),
        **{ALIASES.get(k, k): as_expression(v) for k, v in kwargs.items() if v is not None},
    }


def resolve_mapping(global_mapping: Aesthetic, local_mapping: Optional[Aesthetic], inherit: bool = True) -> Aesthetic:
    """Local channels shadow global ones; channels only in the global mapping are inherited."""
    return {**(global_mapping if inherit else {}), **(local_mapping or {})}
