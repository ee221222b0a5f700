"""Built-in evaluation frameworks.

Registry keys are the stable identifiers accepted by ``get_framework`` and
the CLI's ``--framework`` option.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from framework_eval.core.errors import FrameworkInvalidError
from framework_eval.core.frameworks.models import Category, FrameworkDefinition

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scoring instructions
# ---------------------------------------------------------------------------

ARCHETYPE_SCORING_INSTRUCTIONS = """Score each archetype 0.0-1.0 based on three weighted factors:
  1. Keyword Presence (40%): exact keyword matches from the archetype's keyword signals, plus synonyms and thematic matches
  2. Thematic Alignment (30%): how well content matches the archetype definition and core characteristics
  3. Value Delivery (30%): match with the archetype's "as the guide" assistance patterns and tone consistency

Rubric:
- 0.8-1.0 (Dominant): Strong keyword clusters + perfect thematic match + clear value delivery
- 0.6-0.79 (Strong): Multiple keywords + thematic patterns present + value signals evident
- 0.4-0.59 (Moderate): Some keywords + moderate thematic match + weak value signals
- 0.0-0.39 (Weak/Absent): Minimal or no meaningful presence"""

# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

B2B_ELEMENTS = FrameworkDefinition(
    name="B2B Elements of Value",
    description="Bain & Company's 42 business-to-business value elements",
    categories=[
        Category(
            name="Table Stakes",
            key="table_stakes",
            elements=[
                "meeting_specifications",
                "acceptable_price",
                "regulatory_compliance",
                "ethical_standards",
            ],
        ),
        Category(
            name="Functional Value",
            key="functional",
            elements=[
                "improved_top_line",
                "cost_reduction",
                "product_quality",
                "scalability",
                "innovation",
                "risk_reduction",
                "reach",
                "flexibility",
                "component_quality",
            ],
        ),
        Category(
            name="Ease of Doing Business",
            key="ease_of_business",
            elements=[
                "time_savings",
                "reduced_effort",
                "decreased_hassles",
                "information",
                "transparency",
                "organization",
                "simplification",
                "connection",
                "integration",
                "access",
                "availability",
                "variety",
                "configurability",
                "responsiveness",
                "expertise",
                "commitment",
                "stability",
                "cultural_fit",
            ],
        ),
        Category(
            name="Individual Value",
            key="individual",
            elements=[
                "network_expansion",
                "marketability",
                "reputational_assurance",
                "design_aesthetics_b2b",
                "growth_development",
                "reduced_anxiety_b2b",
                "fun_perks",
            ],
        ),
        Category(
            name="Inspirational Value",
            key="inspirational",
            elements=["purpose", "vision", "hope_b2b", "social_responsibility"],
        ),
    ],
)

B2C_ELEMENTS = FrameworkDefinition(
    name="B2C Elements of Value",
    description="Bain & Company's 30 consumer value elements",
    categories=[
        Category(
            name="Functional",
            key="functional",
            elements=[
                "saves_time",
                "simplifies",
                "makes_money",
                "reduces_effort",
                "reduces_cost",
                "reduces_risk",
                "organizes",
                "integrates",
                "connects",
                "quality",
                "variety",
                "informs",
                "avoids_hassles",
                "sensory_appeal",
            ],
        ),
        Category(
            name="Emotional",
            key="emotional",
            elements=[
                "reduces_anxiety",
                "rewards_me",
                "nostalgia",
                "design_aesthetics",
                "badge_value",
                "wellness",
                "therapeutic",
                "fun_entertainment",
                "attractiveness",
                "provides_access",
            ],
        ),
        Category(
            name="Life-Changing",
            key="life_changing",
            elements=[
                "provides_hope",
                "self_actualization",
                "motivation",
                "heirloom",
                "affiliation_belonging",
            ],
        ),
        Category(
            name="Social Impact",
            key="social_impact",
            elements=["self_transcendence"],
        ),
    ],
)

CLIFTON_STRENGTHS = FrameworkDefinition(
    name="CliftonStrengths",
    description="Gallup's 34 talent themes in four domains",
    categories=[
        Category(
            name="Strategic Thinking",
            key="strategic_thinking",
            elements=[
                "analytical",
                "context",
                "futuristic",
                "ideation",
                "input",
                "intellection",
                "learner",
                "strategic",
            ],
        ),
        Category(
            name="Executing",
            key="executing",
            elements=[
                "achiever",
                "arranger",
                "belief",
                "consistency",
                "deliberative",
                "discipline",
                "focus",
                "responsibility",
                "restorative",
            ],
        ),
        Category(
            name="Influencing",
            key="influencing",
            elements=[
                "activator",
                "command",
                "communication",
                "competition",
                "maximizer",
                "self_assurance",
                "significance",
                "woo",
            ],
        ),
        Category(
            name="Relationship Building",
            key="relationship_building",
            elements=[
                "adaptability",
                "connectedness",
                "developer",
                "empathy",
                "harmony",
                "includer",
                "individualization",
                "positivity",
                "relator",
            ],
        ),
    ],
)

BRAND_ARCHETYPES = FrameworkDefinition(
    name="Jambojon Brand Archetypes",
    description="12 brand archetypes in four motivational groups",
    scoring_instructions=ARCHETYPE_SCORING_INSTRUCTIONS,
    categories=[
        Category(
            name="Ego Archetypes (Leave a Mark on the World)",
            key="ego",
            elements=["hero", "magician", "outlaw"],
        ),
        Category(
            name="Order Archetypes (Provide Structure)",
            key="order",
            elements=["caregiver", "ruler", "creator"],
        ),
        Category(
            name="Freedom Archetypes (Yearn for Paradise)",
            key="freedom",
            elements=["innocent", "explorer", "sage"],
        ),
        Category(
            name="Social Archetypes (Connect with Others)",
            key="social",
            elements=["regular_guy_girl", "jester", "lover"],
        ),
    ],
)

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

BUILTIN_FRAMEWORKS: Dict[str, FrameworkDefinition] = {
    "b2b-elements": B2B_ELEMENTS,
    "b2c-elements": B2C_ELEMENTS,
    "clifton-strengths": CLIFTON_STRENGTHS,
    "brand-archetypes": BRAND_ARCHETYPES,
}


def list_frameworks() -> List[str]:
    """Return registry keys of the built-in frameworks, in declaration order."""
    return list(BUILTIN_FRAMEWORKS)


def get_framework(name: str) -> FrameworkDefinition:
    """Look up a built-in framework by registry key or display name.

    Matching is case-insensitive; display names match on their slug
    (``"CliftonStrengths"`` and ``"clifton-strengths"`` both resolve).

    Raises:
        FrameworkInvalidError: If no built-in framework matches
    """
    key = name.strip().lower()
    if key in BUILTIN_FRAMEWORKS:
        return BUILTIN_FRAMEWORKS[key]
    for framework in BUILTIN_FRAMEWORKS.values():
        if framework.slug == key or framework.name.lower() == key:
            return framework
    logger.debug("Unknown built-in framework requested: %s", name)
    raise FrameworkInvalidError(
        f"Unknown framework '{name}'. Available: {', '.join(BUILTIN_FRAMEWORKS)}",
        framework=name,
    )
