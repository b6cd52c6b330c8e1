"""Type aliases to improve type hint readability."""

from typing import Callable, TypeAlias
from jax import Array

State: TypeAlias = Array
RightHandSide: TypeAlias = Callable[..., Array]
