"""Evaluator expertise weights and expertise tiers."""

import logging
import math
import threading

from domain.constants import EXPERT_EVALUATOR_MIN, HIGH_CONFIDENCE_MIN, MEDIUM_CONFIDENCE_MIN
from domain.schemas import EvaluatorProfile, ExpertiseTier, UserInfo, WeightComponents
from infrastructure.config.models import ExpertiseConfig, TierConfig

logger = logging.getLogger(__name__)


def assign_tier(weight: float, tiers: TierConfig | None = None) -> ExpertiseTier:
    """
    Tier of an expertise weight using half-open ``[min, max)`` bands.

    A weight on a boundary belongs to the higher tier (4.0 -> expert).
    Values below the lowest band (or NaN) fall into the lowest tier and values
    at or above the highest band's max into the highest tier.
    """
    ordered = (tiers or TierConfig()).ordered()
    if math.isnan(weight) or weight < ordered[0][1].min_weight:
        return ordered[0][0]
    for tier, band in ordered:
        if band.contains(weight):
            return tier
    return ordered[-1][0]


def confidence_level(weight: float) -> str:
    if weight >= HIGH_CONFIDENCE_MIN:
        return "High"
    if weight >= MEDIUM_CONFIDENCE_MIN:
        return "Medium"
    return "Low"


def is_expert(weight: float) -> bool:
    return weight >= EXPERT_EVALUATOR_MIN


def format_weight_components(components: WeightComponents) -> list[str]:
    return [
        f"Role Weight: {components.role_weight:.2f}",
        f"Domain Multiplier: {components.domain_multiplier:.2f}",
        f"Experience Multiplier: {components.experience_multiplier:.2f}",
        f"ORKG Bonus: {components.orkg_bonus * 100:.0f}%",
        f"Raw Weight: {components.raw_weight:.2f}",
        f"Final Weight: {components.final_weight:.2f}",
    ]


class ExpertiseWeightCalculator:
    """
    Expertise weight = role weight x domain multiplier x experience multiplier.

    Unknown attribute values count as 1.0. The raw product is kept in the
    weight components; the evaluator weight itself is clamped into
    ``[min_weight, max_weight]`` unless clamping is disabled. ORKG experience
    only adds its bonus when ``apply_orkg_bonus`` is set.

    Profiles are cached per evaluator id, so a weight is computed once per
    evaluator no matter how many papers they rated.
    """

    def __init__(self, config: ExpertiseConfig | None = None, tiers: TierConfig | None = None) -> None:
        self.config = config or ExpertiseConfig()
        self.tiers = tiers or TierConfig()
        self._profiles: dict[str, EvaluatorProfile] = {}
        self._lock = threading.Lock()

    def components(self, info: UserInfo | EvaluatorProfile) -> WeightComponents:
        cfg = self.config
        role_weight = cfg.role_weights.get(info.role or "", cfg.unknown_factor)
        domain_mult = cfg.domain_multipliers.get(info.domain_expertise or "", cfg.unknown_factor)
        exp_mult = cfg.experience_multipliers.get(info.evaluation_experience or "", cfg.unknown_factor)

        raw = role_weight * domain_mult * exp_mult
        bonus = 0.0
        if cfg.apply_orkg_bonus and info.has_orkg_experience:
            bonus = cfg.orkg_bonus
            raw *= 1.0 + bonus

        final = min(max(raw, cfg.min_weight), cfg.max_weight) if cfg.clamp else raw
        return WeightComponents(
            role_weight=role_weight,
            domain_multiplier=domain_mult,
            experience_multiplier=exp_mult,
            orkg_bonus=bonus,
            raw_weight=raw,
            final_weight=final,
        )

    def weight(self, info: UserInfo | EvaluatorProfile) -> float:
        return self.components(info).final_weight

    def profile(self, info: UserInfo) -> EvaluatorProfile:
        """
        Evaluator profile with its weight, computed on first sight of the evaluator.

        A submission that carries only a precomputed ``expertiseWeight`` (no
        role, domain or experience) keeps that weight.
        """
        evaluator_id = info.evaluator_id
        with self._lock:
            cached = self._profiles.get(evaluator_id)
            if cached is not None:
                return cached

            has_attributes = any((info.role, info.domain_expertise, info.evaluation_experience))
            if not has_attributes and info.expertise_weight is not None:
                components = None
                weight = float(info.expertise_weight)
            else:
                components = self.components(info)
                weight = components.final_weight

            profile = EvaluatorProfile(
                evaluator_id=evaluator_id,
                role=info.role,
                domain_expertise=info.domain_expertise,
                evaluation_experience=info.evaluation_experience,
                orkg_experience=info.orkg_experience,
                expertise_weight=weight,
                weight_components=components,
            )
            self._profiles[evaluator_id] = profile

        logger.debug(
            "Evaluator %s: role=%s domain=%s experience=%s -> weight=%.3f (%s)",
            evaluator_id,
            info.role,
            info.domain_expertise,
            info.evaluation_experience,
            weight,
            self.tier(weight).value,
        )
        return profile

    def profiles(self) -> dict[str, EvaluatorProfile]:
        with self._lock:
            return dict(self._profiles)

    def tier(self, weight: float) -> ExpertiseTier:
        return assign_tier(weight, self.tiers)

    def is_valid_profile(self, info: UserInfo | EvaluatorProfile) -> bool:
        """All three weight attributes present and known to the lookup tables."""
        cfg = self.config
        return (
            bool(info.role and info.domain_expertise and info.evaluation_experience)
            and info.role in cfg.role_weights
            and info.domain_expertise in cfg.domain_multipliers
            and info.evaluation_experience in cfg.experience_multipliers
        )
