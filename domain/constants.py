"""Fixed scoring constants (weights, floors, thresholds and lookup tables).

Every number the scoring engine uses lives here so tests and configuration
defaults can refer to the same values.
"""

# ----- Relevance composite -----
HIERARCHY_WEIGHT = 0.4
WORD_OVERLAP_WEIGHT = 0.4
JACCARD_WEIGHT = 0.2

# ----- Hierarchy score -----
HIERARCHY_EXACT_SCORE = 1.0
HIERARCHY_FLOOR = 0.1
HIERARCHY_ANCESTRY_WEIGHT = 0.6
HIERARCHY_CLOSENESS_WEIGHT = 0.4

# ----- Comparison statuses -----
PARTIAL_SIMILARITY_THRESHOLD = 0.8
TOP_K_FIELDS = 5
NO_RESEARCH_PROBLEM = "No Research Problem"

# Credit per comparison status when rolling components into one paper accuracy
STATUS_CREDIT = {
    "correct": 1.0,
    "partial": 0.5,
    "llm_generated": 0.7,
    "incorrect": 0.0,
}

# Overall paper status (accuracy >= threshold); below fair is poor
PAPER_EXCELLENT_MIN = 0.9
PAPER_GOOD_MIN = 0.7
PAPER_FAIR_MIN = 0.5

# ----- Automated / human blend -----
AUTOMATED_BLEND_WEIGHT = 0.6
USER_BLEND_WEIGHT = 0.4

# ----- Expertise weights -----
ROLE_WEIGHTS = {
    "Professor": 5.0,
    "PostDoc": 4.0,
    "Senior Researcher": 4.0,
    "Researcher": 3.5,
    "PhD Student": 3.0,
    "Research Assistant": 2.5,
    "Master Student": 2.0,
    "Bachelor Student": 1.5,
    "Other": 1.0,
}

DOMAIN_MULTIPLIERS = {
    "Expert": 2.0,
    "Advanced": 1.5,
    "Intermediate": 1.0,
    "Basic": 0.8,
    "Novice": 0.6,
}

EXPERIENCE_MULTIPLIERS = {
    "Extensive": 1.3,
    "Moderate": 1.1,
    "Limited": 1.0,
    "None": 0.9,
}

UNKNOWN_FACTOR = 1.0
DEFAULT_EVALUATOR_WEIGHT = 1.0

MIN_EXPERTISE_WEIGHT = 1.0
MAX_EXPERTISE_WEIGHT = 5.0

ORKG_BONUS = 0.05
ORKG_EXPERIENCED_VALUE = "used"

# Confidence bands for a single evaluator weight
HIGH_CONFIDENCE_MIN = 4.0
MEDIUM_CONFIDENCE_MIN = 2.5
EXPERT_EVALUATOR_MIN = 4.0

# ----- Expertise tiers: name -> [min, max) -----
TIER_RANGES = {
    "expert": (4.0, 5.1),
    "senior": (3.0, 4.0),
    "intermediate": (2.0, 3.0),
    "junior": (0.0, 2.0),
}

# ----- User ratings -----
STAR_SCALE_MAX = 5.0
