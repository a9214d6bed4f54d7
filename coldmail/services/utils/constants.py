COLD_EMAIL_PRINCIPLES = [
    "Keep it 5-8 sentences (optimized for mobile viewing)",
    "Break up lines after every 2 sentences maximum",
    "Focus on customer pain points, not product features",
    "Emphasize prospect's company and their specific problems",
    "Use appropriate call-to-action based on strategy",
]

CTA_DESCRIPTIONS = {
    "direct": "ask for a call",
    "soft": "offer to share more information",
}

IMPROVEMENT_CATEGORIES = ["Pain Points", "Solution Positioning", "Industry Context"]

MAX_LISTED_ITEMS = 3
MAX_SCORE = 10
MAX_RESPONSE_RATE = 5.0

GENERATION_SCHEMA = {
    "type": "json_schema",
    "name": "email_drafts",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "improvements": {"type": ["string", "null"]},
            "variant1": {"type": "string"},
            "variant2": {"type": "string"},
        },
        "required": ["improvements", "variant1", "variant2"],
        "additionalProperties": False,
    },
}

REGENERATION_SCHEMA = {
    "type": "json_schema",
    "name": "email_replacement",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "variant2": {"type": "string"},
        },
        "required": ["variant2"],
        "additionalProperties": False,
    },
}

# Array lengths and score ranges are stated in the instructions only.
ANALYSIS_SCHEMA = {
    "type": "json_schema",
    "name": "email_metrics",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "readability": {"type": "integer"},
            "personalizationScore": {"type": "integer"},
            "valuePropositionClarity": {"type": "integer"},
            "ctaEffectiveness": {"type": "integer"},
            "estimatedResponseRate": {"type": "number"},
            "keyStrengths": {"type": "array", "items": {"type": "string"}},
            "improvementSuggestions": {"type": "array", "items": {"type": "string"}},
        },
        "required": [
            "readability",
            "personalizationScore",
            "valuePropositionClarity",
            "ctaEffectiveness",
            "estimatedResponseRate",
            "keyStrengths",
            "improvementSuggestions",
        ],
        "additionalProperties": False,
    },
}
