"""
config.py — Run configuration
==============================
Every knob a caller can turn on a single run, as a pydantic model.  A
bad value fails at create_run() time rather than halfway through a
search; pydantic's ValidationError is a ValueError.

Keys may also be given in camelCase (maxSteps, allowDiagonal, …) when a
config arrives as a mapping from a renderer.  Unknown keys are refused.
"""

import random
from typing import Any, Callable, Dict, Optional, Sequence, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from grid import parse_order
from grid.heuristics import Heuristic, heuristic_name, resolve_heuristic
from algorithms.simulated_annealing import DEFAULT_INITIAL_TEMPERATURE, DEFAULT_MIN_TEMPERATURE


class RunConfig(BaseModel):
    """Options for one SearchRun."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    max_steps: Optional[int] = Field(
        None, gt=0,
        description="Steps one run() call may take (None = unbounded)",
        validation_alias=AliasChoices("max_steps", "maxSteps"),
    )
    cooling_schedule: Optional[Callable[[float], float]] = Field(
        None,
        description="T → T' for Simulated Annealing (default geometric α=0.95)",
        validation_alias=AliasChoices("cooling_schedule", "coolingSchedule"),
    )
    random_source: Optional[random.Random] = Field(
        None,
        description="Seeded random.Random for Simulated Annealing",
        validation_alias=AliasChoices("random_source", "randomSource"),
    )
    seed: Optional[int] = Field(None, description="Builds random_source when it is None")
    allow_diagonal: bool = Field(
        False,
        description="8-connected moves",
        validation_alias=AliasChoices("allow_diagonal", "allowDiagonal"),
    )
    heuristic: Union[str, Heuristic, None] = Field(
        None,
        description="Catalogue key or callable (None = grid default; octile instead of manhattan on diagonal runs)",
    )
    neighbor_order: Union[str, Sequence[str], None] = Field(
        None,
        description='Direction order, e.g. "NESW" or ("E", "S", "W", "N")',
        validation_alias=AliasChoices("neighbor_order", "neighborOrder"),
    )
    tie_break: str = Field(
        "fifo",
        description='"fifo" (earliest insertion wins) or "lifo"',
        validation_alias=AliasChoices("tie_break", "tieBreak"),
    )
    backtrack: bool = Field(True, description="Greedy only; False for committed greedy")
    initial_temperature: float = Field(
        DEFAULT_INITIAL_TEMPERATURE, gt=0,
        description="Simulated Annealing start temperature",
        validation_alias=AliasChoices("initial_temperature", "initialTemperature"),
    )
    min_temperature: float = Field(
        DEFAULT_MIN_TEMPERATURE, gt=0,
        description="Simulated Annealing freezes below this",
        validation_alias=AliasChoices("min_temperature", "minTemperature"),
    )

    @field_validator("tie_break")
    @classmethod
    def validate_tie_break(cls, v: str) -> str:
        if v not in ("fifo", "lifo"):
            raise ValueError(f"tie_break must be 'fifo' or 'lifo', got {v!r}")
        return v

    @field_validator("neighbor_order")
    @classmethod
    def validate_neighbor_order(cls, v, info: ValidationInfo):
        # parsed again on every neighbour query
        parse_order(v, info.data.get("allow_diagonal", False))
        if v is None or isinstance(v, str):
            return v
        return tuple(v)

    @field_validator("heuristic")
    @classmethod
    def validate_heuristic(cls, v):
        if v is not None:
            resolve_heuristic(v)
        return v

    # ------------------------------------------------------------------
    # Mapping round-trip
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RunConfig":
        return cls.model_validate(data or {})

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; callables and the random source are left out."""
        data = self.model_dump(exclude={"cooling_schedule", "random_source", "heuristic", "neighbor_order"})
        heuristic = self.heuristic
        if callable(heuristic):
            heuristic = heuristic_name(heuristic)
        order = self.neighbor_order
        if order is not None and not isinstance(order, str):
            order = list(order)
        data["heuristic"]      = heuristic
        data["neighbor_order"] = order
        return data

    def merged(self, **overrides) -> "RunConfig":
        """A validated copy with some fields replaced.  Takes field names only."""
        names   = set(type(self).model_fields)
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise ValueError(f"Unknown run option(s): {', '.join(unknown)}")
        values = {name: getattr(self, name) for name in names}
        values.update(overrides)
        return type(self).model_validate(values)
