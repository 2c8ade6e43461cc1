# create_image/ai/prompts.py
# Prompt templates for the four-image style reference grid

# Visual approach per target audience
AUDIENCE_STYLES: dict[str, str] = {
    "recreational": "friendly, approachable, casual sport photography with warm colours",
    "young-athletes": "dynamic, energetic, modern sports marketing with bold colours",
    "competitive": "professional, intense, sports magazine editorial quality",
    "coaches": "instructional, clear, technical demonstration focus",
    "beginners": "welcoming, simple, easy-to-understand visual guides",
    "seniors": "dignified, active lifestyle, age-appropriate representation",
    "tournament": "competitive edge, professional sports photography",
}

DEFAULT_AUDIENCE = "competitive"

# One scene per grid cell (order = grid position)
PROMPT_VARIATIONS: list[str] = [
    "showing a player demonstrating proper form at the kitchen line with paddle ready",
    "depicting court layout with player positioning from a slight elevated angle",
    "showing two players in a rally with clear technique focus and movement",
    "illustrating a coaching drill setup from an overhead bird eye perspective",
]

PROMPT_PREAMBLE = (
    "Generate a professional sports training illustration for pickleball coaching."
)

REQUIREMENTS: list[str] = [
    "Professional coaching illustration quality",
    "Clear technique demonstration",
    "High contrast for screen display",
    "NO TEXT in image",
    "Sport-accurate equipment and court",
]


# * Visual approach for an audience (unknown or missing -> competitive)
def get_audience_style(audience: str | None) -> str:
    if audience and audience in AUDIENCE_STYLES:
        return AUDIENCE_STYLES[audience]
    return AUDIENCE_STYLES[DEFAULT_AUDIENCE]


# * Build the prompt for one grid cell
def build_prompt(
    variation: str,
    description: str | None = None,
    audience: str | None = None,
    visual_style: str | None = None,
) -> str:
    lines = [
        PROMPT_PREAMBLE,
        "",
        f"SCENE: {variation}",
        f"TARGET AUDIENCE: {audience or DEFAULT_AUDIENCE}",
        f"VISUAL APPROACH: {get_audience_style(audience)}",
    ]

    if description:
        lines += ["", f"STYLE: {description}"]
    if visual_style:
        lines += ["", f"PREFERENCES: {visual_style}"]

    lines += ["", "REQUIREMENTS:"]
    lines += [f"- {requirement}" for requirement in REQUIREMENTS]
    return "\n".join(lines)
