from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from revo.exceptions import ConfigurationError

__all__ = ["EvolutionConfig", "RefinementConfig", "build_config"]


class _SettingsModel(BaseModel):
    """Settings model whose validation failures surface as ``ConfigurationError``."""

    model_config = ConfigDict(extra="forbid")

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid {type(self).__name__}: {exc}") from exc


class RefinementConfig(_SettingsModel):
    """Local search around the best champion after the main loop."""

    iterations: int = Field(default=30, ge=0, description="Maximum number of refinement rounds")
    mutants_per_round: int = Field(default=500, gt=0, description="Mutants of the current best scored per round")
    switch_after_round: int = Field(
        default=5,
        ge=0,
        description="Plateau detection only runs once the round index exceeds this value",
    )
    plateau_lookback: int = Field(
        default=4,
        ge=1,
        description="Compare the current best against history[-plateau_lookback]",
    )
    plateau_ratio: float = Field(
        default=0.9999,
        gt=0,
        description="Switch FAST -> FINE once current / history[-lookback] exceeds this ratio",
    )


class EvolutionConfig(_SettingsModel):
    """Configuration options controlling Evolution behaviour."""

    num_creatures: int = Field(default=10_000, gt=0, description="Population size at every cycle boundary")
    num_cycles: int = Field(default=10, gt=0, description="Number of evaluate/select/reproduce cycles")
    max_layers: int = Field(default=3, ge=1, description="Upper bound on layers per creature")
    workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker pool size (None = shared pool sized from CPU count)",
    )
    refinement: RefinementConfig = Field(default_factory=RefinementConfig)


def build_config(model: type[BaseModel], **values) -> BaseModel:
    """Instantiate *model*, reporting validation failures as ``ConfigurationError``."""
    try:
        return model(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid {model.__name__}: {exc}") from exc
