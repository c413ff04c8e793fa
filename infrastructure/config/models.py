"""Configuration models (Pydantic classes)."""

import math
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from domain import constants as C
from domain.schemas import ExpertiseTier
from infrastructure.constants import DATA_DIR, OUTPUT_ROOT, TAXONOMY_FILE

_SUM_TOLERANCE = 1e-9


def _check_sum_to_one(name: str, values: dict[str, float]) -> None:
    for key, value in values.items():
        if value < 0:
            raise ValueError(f"{name}.{key} must be non-negative, got {value}")
    total = sum(values.values())
    if not math.isclose(total, 1.0, abs_tol=_SUM_TOLERANCE):
        raise ValueError(f"{name} weights must sum to 1.0, got {total}")


class RelevanceWeights(BaseModel):
    """Weights of the composite relevance score."""

    hierarchy: float = C.HIERARCHY_WEIGHT
    word_overlap: float = C.WORD_OVERLAP_WEIGHT
    jaccard: float = C.JACCARD_WEIGHT

    @model_validator(mode="after")
    def _validate(self) -> "RelevanceWeights":
        _check_sum_to_one("relevance", self.model_dump())
        return self


class HierarchyScoreConfig(BaseModel):
    """Hierarchy component of the relevance score."""

    exact_score: float = C.HIERARCHY_EXACT_SCORE
    floor: float = Field(default=C.HIERARCHY_FLOOR, gt=0.0, lt=1.0)
    ancestry_weight: float = C.HIERARCHY_ANCESTRY_WEIGHT
    closeness_weight: float = C.HIERARCHY_CLOSENESS_WEIGHT

    @model_validator(mode="after")
    def _validate(self) -> "HierarchyScoreConfig":
        _check_sum_to_one(
            "hierarchy",
            {"ancestry_weight": self.ancestry_weight, "closeness_weight": self.closeness_weight},
        )
        if self.floor > self.exact_score:
            raise ValueError("hierarchy.floor must not exceed hierarchy.exact_score")
        return self


class BlendConfig(BaseModel):
    """Final = automated * automated_weight + user rating * user_weight."""

    automated_weight: float = C.AUTOMATED_BLEND_WEIGHT
    user_weight: float = C.USER_BLEND_WEIGHT

    @model_validator(mode="after")
    def _validate(self) -> "BlendConfig":
        _check_sum_to_one("blend", self.model_dump())
        return self


class StatusConfig(BaseModel):
    """Comparison status thresholds and per-status credits."""

    partial_similarity: float = Field(default=C.PARTIAL_SIMILARITY_THRESHOLD, ge=0.0, le=1.0)
    top_k_fields: int = Field(default=C.TOP_K_FIELDS, ge=1)
    credits: dict[str, float] = Field(default_factory=lambda: dict(C.STATUS_CREDIT))
    excellent: float = C.PAPER_EXCELLENT_MIN
    good: float = C.PAPER_GOOD_MIN
    fair: float = C.PAPER_FAIR_MIN

    @model_validator(mode="after")
    def _validate(self) -> "StatusConfig":
        if not (1.0 >= self.excellent >= self.good >= self.fair >= 0.0):
            raise ValueError("status thresholds must satisfy 1 >= excellent >= good >= fair >= 0")
        for status, credit in self.credits.items():
            if not 0.0 <= credit <= 1.0:
                raise ValueError(f"status credit for {status!r} must be in [0, 1], got {credit}")
        return self


class TierBand(BaseModel):
    """Half-open weight range [min_weight, max_weight)."""

    min_weight: float
    max_weight: float

    def contains(self, weight: float) -> bool:
        return self.min_weight <= weight < self.max_weight


def _default_tiers() -> dict[ExpertiseTier, TierBand]:
    return {ExpertiseTier(name): TierBand(min_weight=lo, max_weight=hi) for name, (lo, hi) in C.TIER_RANGES.items()}


class TierConfig(BaseModel):
    """Expertise tiers; bands must be contiguous and non-overlapping."""

    bands: dict[ExpertiseTier, TierBand] = Field(default_factory=_default_tiers)

    @model_validator(mode="after")
    def _validate(self) -> "TierConfig":
        if set(self.bands) != set(ExpertiseTier):
            raise ValueError(f"tiers must define exactly {[t.value for t in ExpertiseTier]}")
        ordered = self.ordered()
        for tier, band in ordered:
            if band.min_weight >= band.max_weight:
                raise ValueError(f"tier {tier.value}: min_weight must be < max_weight")
        for (lo_tier, lo), (hi_tier, hi) in zip(ordered, ordered[1:]):
            if not math.isclose(lo.max_weight, hi.min_weight):
                raise ValueError(
                    f"tiers {lo_tier.value} and {hi_tier.value} must be contiguous "
                    f"({lo.max_weight} != {hi.min_weight})"
                )
        return self

    def ordered(self) -> list[tuple[ExpertiseTier, TierBand]]:
        """Bands from lowest to highest weight."""
        return sorted(self.bands.items(), key=lambda item: item[1].min_weight)


class ExpertiseConfig(BaseModel):
    """Lookup tables and bounds of the evaluator expertise weight."""

    role_weights: dict[str, float] = Field(default_factory=lambda: dict(C.ROLE_WEIGHTS))
    domain_multipliers: dict[str, float] = Field(default_factory=lambda: dict(C.DOMAIN_MULTIPLIERS))
    experience_multipliers: dict[str, float] = Field(default_factory=lambda: dict(C.EXPERIENCE_MULTIPLIERS))
    unknown_factor: float = C.UNKNOWN_FACTOR

    clamp: bool = Field(
        default=True,
        description="Clamp the raw product into [min_weight, max_weight]. The raw product is always kept.",
    )
    min_weight: float = C.MIN_EXPERTISE_WEIGHT
    max_weight: float = C.MAX_EXPERTISE_WEIGHT

    apply_orkg_bonus: bool = Field(
        default=False,
        description="Fold ORKG experience into the weight. Off by default: ORKG is a cohort flag.",
    )
    orkg_bonus: float = Field(default=C.ORKG_BONUS, ge=0.0)

    default_weight: float = Field(
        default=C.DEFAULT_EVALUATOR_WEIGHT,
        description="Weight used for evaluators without a known profile.",
    )

    @model_validator(mode="after")
    def _validate(self) -> "ExpertiseConfig":
        if self.min_weight > self.max_weight:
            raise ValueError("expertise.min_weight must not exceed expertise.max_weight")
        return self


class RatingScale(str, Enum):
    """Scale of incoming user ratings."""

    UNIT = "unit"  # already in [0, 1]
    STARS = "stars"  # 1..5 stars, divided by 5


class RatingsConfig(BaseModel):
    scale: RatingScale = RatingScale.UNIT
    star_max: float = Field(default=C.STAR_SCALE_MAX, gt=0.0)


class StatsConfig(BaseModel):
    """
    Configuration for bootstrap confidence intervals.

    A fixed seed keeps intervals reproducible across runs.
    """

    seed: int = 42
    n_boot: int = Field(default=2000, ge=1)
    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)


class ScoringConfig(BaseModel):
    """All scoring constants in one place; every default matches domain.constants."""

    relevance: RelevanceWeights = Field(default_factory=RelevanceWeights)
    hierarchy: HierarchyScoreConfig = Field(default_factory=HierarchyScoreConfig)
    blend: BlendConfig = Field(default_factory=BlendConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    tiers: TierConfig = Field(default_factory=TierConfig)
    expertise: ExpertiseConfig = Field(default_factory=ExpertiseConfig)
    ratings: RatingsConfig = Field(default_factory=RatingsConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)
    component_keys: list[str] = Field(
        default_factory=lambda: ["metadata", "research_field", "research_problem", "template", "content"],
        description="Component keys aggregated across tiers, in report order.",
    )


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from experiment.yaml
    - Validated and enriched by configuration loader
    - Consumed by the report workflow and the CLI
    """

    taxonomy_file: Path = Field(default_factory=lambda: TAXONOMY_FILE)
    ground_truth_file: Path = Field(..., description="Ground-truth records (JSON/YAML list or CSV).")
    evaluations_file: Path = Field(..., description="Evaluation records with system output and user evaluations.")
    components_file: Path | None = Field(
        default=None,
        description="Optional pre-averaged per-paper component scores keyed by paper token.",
    )

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    tiering: bool = Field(default=True, description="Bucket papers by evaluator expertise tier.")
    max_workers: int | None = Field(
        default=None,
        description="Worker threads for per-paper scoring. None or 1 runs sequentially.",
    )
    output_root: Path = Field(default_factory=lambda: OUTPUT_ROOT)
    data_dir: Path = Field(default_factory=lambda: DATA_DIR)

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1 when set")
        return self
