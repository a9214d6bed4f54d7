from ..models import GenerateEmailRequest
from .utils.constants import COLD_EMAIL_PRINCIPLES, CTA_DESCRIPTIONS, IMPROVEMENT_CATEGORIES

GENERATION_SYSTEM_PROMPT = (
    "You are an expert cold email writer who creates highly effective, personalized sales emails. "
    'Respond with a JSON object of the form {"improvements": string or null, "variant1": string, "variant2": string}. '
    "Use \\n for line breaks inside strings. "
    "When you have improvement suggestions, format improvements as three sections separated by \\n\\n: "
    + "; ".join(
        f'"{category}:\\nOriginal: <what the input said>\\nEnhanced: <stronger angle>\\nExample: <one sentence using it>"'
        for category in IMPROVEMENT_CATEGORIES
    )
    + ". Otherwise set improvements to null."
)

REGENERATION_SYSTEM_PROMPT = (
    "You are an expert cold email writer who creates highly effective, personalized sales emails. "
    'Respond with a JSON object of the form {"variant2": string}. '
    "Use \\n for line breaks inside strings."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert in cold email performance analysis. "
    "Analyze the email and respond with a JSON object containing: "
    "readability, personalizationScore, valuePropositionClarity and ctaEffectiveness "
    "(integers from 1 to 10), "
    "estimatedResponseRate (a percentage between 0.1 and 5.0), "
    "keyStrengths (exactly 3 short strings) and "
    "improvementSuggestions (exactly 3 short, actionable strings)."
)

LEGACY_RESPONSE_INSTRUCTION = (
    "Respond with a JSON object containing two email variants and any suggested improvements. "
    'Format as: { "improvements": "any improvement suggestions (optional)", '
    '"variant1": "first email version", "variant2": "second email version" }'
)


def _text(value: str | None) -> str:
    return value if value is not None else ""


def format_principles() -> str:
    return "\n".join(f"{index}. {principle}" for index, principle in enumerate(COLD_EMAIL_PRINCIPLES, start=1))


def format_cta_style(cta_type: str) -> str:
    description = CTA_DESCRIPTIONS.get(cta_type, "")
    return f"{cta_type} ({description})" if description else cta_type


def format_input_fields(request: GenerateEmailRequest) -> str:
    prospect = request.prospect
    product = request.product
    lines = [
        f"- Prospect Name: {_text(prospect.name if prospect else None)}",
        f"- Prospect Company: {_text(prospect.company if prospect else None)}",
        f"- Prospect Role: {_text(prospect.role if prospect else None)}",
        f"- Product Description: {_text(product.description if product else None)}",
        f"- Main Pain Point: {_text(product.pain_point if product else None)}",
        f"- Solution: {_text(product.solution if product else None)}",
        f"- CTA Style: {format_cta_style(request.strategy.cta_type)}",
    ]
    return "\n".join(lines)


def build_generation_prompt(request: GenerateEmailRequest) -> str:
    """Ask for two distinct drafts plus optional improvement notes."""
    return "\n".join(
        [
            "Write two different versions of a cold sales email using these principles:",
            format_principles(),
            "",
            "Use this information:",
            format_input_fields(request),
            "",
            "Before writing the emails, analyze if there are any additional relevant pain points or "
            "solutions that might resonate better with this prospect based on their role and industry. "
            'If you find better alternatives, describe them in the "improvements" field.',
            "",
            'Then provide the two emails as "variant1" and "variant2".',
            "Keep each email concise and mobile-friendly.",
            "Make the versions distinctly different in approach while maintaining effectiveness.",
            "Consider incorporating any of your suggested improvements in variant2 if they're "
            "significantly stronger than the provided pain points/solutions.",
        ]
    )


def build_regeneration_prompt(request: GenerateEmailRequest) -> str:
    """Ask for a single replacement email that applies earlier improvement notes."""
    return "\n".join(
        [
            "Write one new version of a cold sales email using these principles:",
            format_principles(),
            "",
            "Use this information:",
            format_input_fields(request),
            "",
            "Rewrite the email so it incorporates these suggested improvements:",
            _text(request.improvements),
            "",
            'Return only the replacement email as "variant2".',
        ]
    )


def build_legacy_prompt(prompt: str) -> str:
    return f"{prompt}\n\n{LEGACY_RESPONSE_INSTRUCTION}"


def build_analysis_prompt(email_content: str) -> str:
    return f"Analyze this cold email:\n\n{email_content}"


def build_messages(system_prompt: str, user_prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
