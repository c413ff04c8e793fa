"""Pydantic models for taxonomy, evaluation records and scoring results.

Input records mirror the camelCase keys produced by the evaluation front end
(aliases) while exposing snake_case attributes. Result models are plain
snake_case and serialize with ``model_dump(mode="json")``.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from domain.constants import ORKG_EXPERIENCED_VALUE

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RelationshipType(str, Enum):
    """Path-based relationship between two taxonomy nodes."""

    SAME = "same"
    PARENT = "parent"
    CHILD = "child"
    SIBLING = "sibling"
    ANCESTOR = "ancestor"
    DESCENDANT = "descendant"
    DISTANT = "distant"


class ExpertiseTier(str, Enum):
    """Expertise band over the evaluator weight scale."""

    EXPERT = "expert"
    SENIOR = "senior"
    INTERMEDIATE = "intermediate"
    JUNIOR = "junior"


class ComparisonStatus(str, Enum):
    """Outcome of comparing one extracted entity against ground truth."""

    CORRECT = "correct"
    PARTIAL = "partial"
    INCORRECT = "incorrect"
    LLM_GENERATED = "llm_generated"
    NO_PROBLEM = "no_problem"
    BOTH_EMPTY = "both_empty"
    FALSE_POSITIVE = "false_positive"
    FALSE_NEGATIVE = "false_negative"


class PaperStatus(str, Enum):
    """Overall accuracy band of a single paper."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------


class TaxonomyNode(BaseModel):
    """One node of the research-field tree as found in the taxonomy document."""

    id: str = Field(..., min_length=1, description="Stable node identifier.")
    label: str = Field(..., description="Display label; lookups by label are exact and case-sensitive.")
    children: list["TaxonomyNode"] = Field(default_factory=list)

    @field_validator("id", "label", mode="before")
    @classmethod
    def _coerce_str(cls, v: Any) -> Any:
        # Numeric ids are common in exported taxonomies
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


TaxonomyNode.model_rebuild()


class PathNode(BaseModel):
    """Single step of a root-to-node taxonomy path."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class RelationshipResult(BaseModel):
    type: RelationshipType
    distance: int = Field(..., ge=-1, description="Edge count between the nodes; -1 when unresolvable.")
    common_ancestor: PathNode | None = None


# ---------------------------------------------------------------------------
# Similarity / relevance results
# ---------------------------------------------------------------------------


class LexicalMetrics(BaseModel):
    word_overlap_score: float = Field(..., ge=0.0, le=1.0)
    jaccard_score: float = Field(..., ge=0.0, le=1.0)
    precision: float = Field(..., ge=0.0, le=1.0)
    recall: float = Field(..., ge=0.0, le=1.0)
    f1_score: float = Field(..., ge=0.0, le=1.0)


class RelevanceResult(BaseModel):
    """Composite relevance of a prediction against a ground-truth label."""

    hierarchy_score: float = Field(..., ge=0.0, le=1.0)
    word_overlap_score: float = Field(..., ge=0.0, le=1.0)
    jaccard_score: float = Field(..., ge=0.0, le=1.0)
    relevance_score: float = Field(..., ge=0.0, le=1.0)

    # Details (reported, not part of the composite)
    is_exact_match: bool = False
    common_ancestors: int = 0
    relationship: RelationshipResult
    path_jaccard_score: float = Field(default=0.0, ge=0.0, le=1.0)


# ---------------------------------------------------------------------------
# Evaluation input records
# ---------------------------------------------------------------------------


class _Record(BaseModel):
    """Base for camelCase input records; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class UserInfo(_Record):
    """Evaluator profile attributes as submitted with an evaluation."""

    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None
    role: str | None = None
    domain_expertise: str | None = Field(default=None, alias="domainExpertise")
    evaluation_experience: str | None = Field(default=None, alias="evaluationExperience")
    orkg_experience: str | None = Field(default=None, alias="orkgExperience")
    expertise_weight: float | None = Field(default=None, alias="expertiseWeight")
    # Set for anonymous submissions so they never share a profile across papers
    scoped_id: str | None = Field(default=None, exclude=True)

    @property
    def has_orkg_experience(self) -> bool:
        return (self.orkg_experience or "").strip().lower() == ORKG_EXPERIENCED_VALUE

    @property
    def is_anonymous(self) -> bool:
        return not (self.email or self.first_name or self.last_name)

    @property
    def evaluator_id(self) -> str:
        if self.scoped_id:
            return self.scoped_id
        if self.email:
            return self.email.strip().lower()
        return f"{self.first_name or 'Unknown'}_{self.last_name or 'Unknown'}"


class UserEvaluation(_Record):
    user_info: UserInfo | None = Field(default=None, alias="userInfo")
    evaluation_metrics: dict[str, Any] = Field(default_factory=dict, alias="evaluationMetrics")
    timestamp: str | None = None


class CandidateEntity(_Record):
    """Field, problem or template candidate produced by the extraction pipeline."""

    id: str | None = None
    label: str | None = None
    name: str | None = None
    title: str | None = None
    source: str | None = None
    score: float | None = None
    confidence: float | None = None
    description: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def display_name(self) -> str:
        return self.label or self.name or self.title or ""


class ResearchFieldsBlock(_Record):
    selected_field: CandidateEntity | None = Field(default=None, alias="selectedField")
    fields: list[CandidateEntity] = Field(default_factory=list)


class ResearchProblemsBlock(_Record):
    selected_problem: CandidateEntity | None = Field(default=None, alias="selectedProblem")
    orkg_problems: list[CandidateEntity] = Field(default_factory=list)
    llm_problem: Any = None


class TemplatesBlock(_Record):
    selected_template: CandidateEntity | None = Field(default=None, alias="selectedTemplate")
    llm_template: Any = None


class ExtractedMetadata(_Record):
    title: str | None = None
    doi: str | None = None
    publication_date: str | None = Field(default=None, alias="publicationDate")
    venue: str | None = None
    authors: list[str] = Field(default_factory=list)

    @field_validator("publication_date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @field_validator("authors", mode="before")
    @classmethod
    def _author_names(cls, v: Any) -> Any:
        # Authors arrive either as plain names or as {"name": ...} objects
        if v is None:
            return []
        if isinstance(v, list):
            return [a.get("name", "") if isinstance(a, dict) else a for a in v if a]
        return v


class EvaluationRecord(_Record):
    """System output for one paper plus the evaluator submissions about it."""

    token: str = Field(..., validation_alias=AliasChoices("token", "paperId", "paper_id"))
    metadata: ExtractedMetadata | None = None
    research_fields: ResearchFieldsBlock | None = Field(default=None, alias="researchFields")
    research_problems: ResearchProblemsBlock | None = Field(default=None, alias="researchProblems")
    templates: TemplatesBlock | None = None
    user_evaluations: list[UserEvaluation] = Field(default_factory=list, alias="userEvaluations")

    @field_validator("token", mode="before")
    @classmethod
    def _coerce_token(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("user_evaluations", mode="before")
    @classmethod
    def _require_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError(f"userEvaluations must be a list, got {type(v).__name__}")
        return v


class GroundTruthRecord(_Record):
    """Flat ground-truth annotation of one paper."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    paper_id: str | None = Field(default=None, validation_alias=AliasChoices("paper_id", "id", "token"))
    title: str | None = None
    doi: str | None = None
    publication_year: str | None = None
    venue: str | None = None
    research_field_id: str | None = None
    research_field_name: str | None = None
    research_problem_id: str | None = None
    research_problem_name: str | None = None
    template_id: str | None = None
    template_name: str | None = None

    @field_validator(
        "paper_id",
        "publication_year",
        "research_field_id",
        "research_problem_id",
        "template_id",
        mode="before",
    )
    @classmethod
    def _coerce_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v

    @property
    def authors(self) -> list[str]:
        """Author columns (``author_1``, ``author_2``, ...) in their stored order."""
        extras = self.model_extra or {}
        authors: list[str] = []
        for key, value in extras.items():
            if not key.startswith("author") or not value:
                continue
            if isinstance(value, list):
                authors.extend(str(v) for v in value if v)
            else:
                authors.append(str(value))
        return authors


class MeanBlock(_Record):
    mean: float | None = None


class ComponentRecord(_Record):
    """Pre-averaged scores for one (paper, component) pair."""

    accuracy_scores: MeanBlock | None = Field(default=None, alias="accuracyScores")
    scores: MeanBlock | None = None
    quality_scores: MeanBlock | None = Field(default=None, alias="qualityScores")
    user_ratings: MeanBlock | None = Field(default=None, alias="userRatings")

    @property
    def accuracy_auto(self) -> float | None:
        if self.accuracy_scores is not None and self.accuracy_scores.mean is not None:
            return self.accuracy_scores.mean
        return self.scores.mean if self.scores is not None else None

    @property
    def quality_auto(self) -> float | None:
        return self.quality_scores.mean if self.quality_scores is not None else None

    @property
    def user_rating(self) -> float | None:
        return self.user_ratings.mean if self.user_ratings is not None else None


# ---------------------------------------------------------------------------
# Expertise
# ---------------------------------------------------------------------------


class WeightComponents(BaseModel):
    role_weight: float
    domain_multiplier: float
    experience_multiplier: float
    orkg_bonus: float = 0.0
    raw_weight: float
    final_weight: float


class EvaluatorProfile(BaseModel):
    """Evaluator attributes with the expertise weight computed once."""

    evaluator_id: str
    role: str | None = None
    domain_expertise: str | None = None
    evaluation_experience: str | None = None
    orkg_experience: str | None = None
    expertise_weight: float = Field(default=1.0, ge=0.0)
    weight_components: WeightComponents | None = None

    @property
    def has_orkg_experience(self) -> bool:
        return (self.orkg_experience or "").strip().lower() == ORKG_EXPERIENCED_VALUE


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class ComponentScore(BaseModel):
    """Automated and human scores for one (paper, component) pair."""

    accuracy_auto: float | None = None
    quality_auto: float | None = None
    user_rating: float | None = Field(default=None, ge=0.0, le=1.0)
    final_accuracy: float | None = None
    final_quality: float | None = None


class PaperScores(BaseModel):
    """Component scores of one paper together with the evaluators who rated it."""

    paper_id: str
    evaluator_ids: list[str] = Field(default_factory=list)
    components: dict[str, ComponentScore] = Field(default_factory=dict)


class ScoreSummary(BaseModel):
    accuracy: float | None = None
    quality: float | None = None
    accuracy_count: int = 0
    quality_count: int = 0
    gap: float | None = None


class GroupSummary(BaseModel):
    """Component-level and overall scores for a group of papers (tier, cohort or all)."""

    paper_count: int = 0
    components: dict[str, ScoreSummary] = Field(default_factory=dict)
    overall: ScoreSummary = Field(default_factory=ScoreSummary)


class TierSummary(GroupSummary):
    tier: ExpertiseTier
    min_weight: float
    max_weight: float


class ConfidenceInterval(BaseModel):
    lower: float
    upper: float
    n: int


class AggregateReport(BaseModel):
    tiers: dict[ExpertiseTier, TierSummary] = Field(default_factory=dict)
    overall: GroupSummary = Field(default_factory=GroupSummary)
    paper_expertise: dict[str, float] = Field(default_factory=dict)
    paper_tiers: dict[str, ExpertiseTier] = Field(default_factory=dict)
    untiered_papers: list[str] = Field(default_factory=list)
    accuracy_ci: dict[str, ConfidenceInterval | None] = Field(default_factory=dict)
    quality_ci: dict[str, ConfidenceInterval | None] = Field(default_factory=dict)


class CohortComparison(BaseModel):
    """Scores of papers rated by ORKG-experienced evaluators vs. the rest."""

    with_orkg: GroupSummary
    without_orkg: GroupSummary
    accuracy_difference: float | None = None
    quality_difference: float | None = None


class DistributionEntry(BaseModel):
    count: int
    mean_weight: float


class EvaluatorSummary(BaseModel):
    total: int = 0
    mean_weight: float | None = None
    std_weight: float | None = None
    orkg_experienced: int = 0
    orkg_share: float | None = None
    by_role: dict[str, DistributionEntry] = Field(default_factory=dict)
    by_domain_expertise: dict[str, DistributionEntry] = Field(default_factory=dict)
    by_tier: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Comparisons and reports
# ---------------------------------------------------------------------------


class FieldComparison(BaseModel):
    """Ground truth vs. extracted value of one scalar/list field."""

    ground_truth: Any = None
    extracted: Any = None
    exact_match: bool = False
    similarity: float = Field(default=0.0, ge=0.0, le=1.0)
    status: ComparisonStatus


class MetadataComparison(BaseModel):
    fields: dict[str, FieldComparison]
    accuracy: float
    correct_fields: int
    partial_fields: int
    incorrect_fields: int
    total_fields: int


class EntityComparison(BaseModel):
    """Research field / problem / template comparison."""

    ground_truth_id: str | None = None
    ground_truth_name: str | None = None
    extracted_id: str | None = None
    extracted_name: str | None = None
    extracted_source: str | None = None
    exact_match: bool = False
    name_similarity: float = Field(default=0.0, ge=0.0, le=1.0)
    status: ComparisonStatus

    # Entity-specific details
    in_top5: bool | None = None
    found_in_orkg: bool | None = None
    llm_generated: bool | None = None
    relevance: RelevanceResult | None = None
    candidates: list[str] = Field(default_factory=list)


class FieldAccuracy(BaseModel):
    accuracy: float
    precision: float
    recall: float
    f1: float
    status: ComparisonStatus


class ConfusionMatrix(BaseModel):
    tp: int = 0
    tn: int = 0
    fp: int = 0
    fn: int = 0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    accuracy: float = 0.0


class PaperAccuracyReport(BaseModel):
    paper_id: str
    metadata: MetadataComparison | None = None
    research_field: EntityComparison | None = None
    research_problem: EntityComparison | None = None
    template: EntityComparison | None = None
    component_credits: dict[str, float] = Field(default_factory=dict)
    accuracy: float | None = None
    status: PaperStatus = PaperStatus.UNKNOWN


class AccuracyReport(BaseModel):
    """Everything computed for one evaluation corpus."""

    papers: list[PaperAccuracyReport] = Field(default_factory=list)
    aggregate: AggregateReport
    evaluators: dict[str, EvaluatorProfile] = Field(default_factory=dict)
    evaluator_summary: EvaluatorSummary = Field(default_factory=EvaluatorSummary)
    cohorts: CohortComparison | None = None
    confusion: dict[str, ConfusionMatrix] = Field(default_factory=dict)
    status_counts: dict[str, int] = Field(default_factory=dict)
