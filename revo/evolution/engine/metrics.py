from __future__ import annotations

from pydantic import BaseModel, Field


class EngineMetrics(BaseModel):
    """Counters collected over one evolution run."""

    cycles_completed: int = Field(default=0, description="Total number of cycles run")
    creatures_created: int = Field(default=0, description="Randomly constructed creatures (initial + refill)")
    creatures_scored: int = Field(default=0, description="Fitness evaluations performed")
    cache_hits: int = Field(default=0, description="Creatures whose cached error was reused")
    creatures_culled: int = Field(default=0, description="Creatures dropped at or above the median")
    mutants_created: int = Field(default=0, description="Mutants added during reproduction")
    refills: int = Field(default=0, description="Random creatures added to restore population size")
    champion_errors: list[float] = Field(default_factory=list, description="Champion error per cycle")
    refinement_rounds: int = Field(default=0, description="Refinement rounds run")
    refinement_improvements: int = Field(default=0, description="Rounds that adopted a better mutant")

    def record_evaluation(self, scored: int, population_size: int) -> None:
        self.creatures_scored += scored
        self.cache_hits += population_size - scored

    def record_reproduction(self, culled: int, mutants: int, refills: int) -> None:
        self.creatures_culled += culled
        self.mutants_created += mutants
        self.refills += refills
        self.creatures_created += refills

    def record_champion(self, error: float) -> None:
        self.champion_errors.append(error)

    def record_refinement_round(self, improved: bool) -> None:
        self.refinement_rounds += 1
        self.refinement_improvements += int(improved)

    def to_dict(self) -> dict[str, object]:
        return self.model_dump(exclude={"champion_errors"})
