"""
Prompts and prompt builders for grading and illustration generation.
"""

from typing import Optional

from scholarcast.models.request import QuizAnswer

# Module content is truncated before it is sent to a provider
MAX_GRADING_CONTENT_CHARS = 6000
MAX_ILLUSTRATION_CONTENT_CHARS = 1500


# =============================================================================
# GRADING
# =============================================================================

GRADING_SYSTEM_PROMPT = """You are a fair, encouraging teacher grading a student's answer.

Respond in JSON only:
{
  "score": 0-100,
  "feedback": "2-4 sentences of specific, constructive feedback"
}
score: 90+ excellent and complete, 70-89 good with minor gaps, 50-69 partial, <50 major gaps or off-topic.
Judge the answer against the module content, not against outside knowledge.
Address the student directly. Respond in the student's language."""


def build_grading_prompt(item: QuizAnswer, module_content: str) -> str:
    """Build the user prompt for one graded answer."""
    context = "=== Module Content ===\n"
    context += module_content[:MAX_GRADING_CONTENT_CHARS].strip()
    context += "\n\n"

    if item.question_text:
        context += f"=== Question ===\n{item.question_text.strip()}\n\n"

    context += f"=== Student Answer ===\n{item.student_answer.strip()}\n"
    return context


# =============================================================================
# ILLUSTRATION
# =============================================================================

STYLE_DESCRIPTIONS = {
    "schema": "a clean conceptual schema with labeled boxes and arrows showing relationships",
    "infographic": "an educational infographic with clear sections, icons and visual hierarchy",
    "conceptual": "a conceptual illustration that captures the core idea through a visual metaphor",
    "textbook": "a high-quality textbook illustration that explains the topic at a glance",
    "header": "a wide, atmospheric header image that introduces the topic",
    "diagram": "a precise technical diagram with accurate structure and clear labels",
}

VISUAL_STYLE_DESCRIPTIONS = {
    "photorealistic": "photorealistic rendering, natural lighting, realistic materials",
    "anime": "anime art style, clean line art, vibrant cel shading",
    "comic": "comic book style, bold ink outlines, halftone shading",
    "pixel-art": "pixel art style, limited palette, crisp pixels",
    "watercolor": "soft watercolor painting, gentle washes, paper texture",
}

LABEL_LANGUAGE = {
    "en": "Any text labels must be in English.",
    "es": "Cualquier texto o etiqueta debe estar en español.",
}

DEFAULT_NEGATIVE_PROMPT = (
    "blurry, low quality, distorted, watermark, signature, misspelled text, "
    "gibberish text, extra limbs, cropped, jpeg artifacts"
)


def build_illustration_prompt(
    content: str,
    locale: str,
    style: str,
    visual_style: str,
) -> str:
    """Build the image prompt for an educational illustration."""
    excerpt = " ".join(content.split())[:MAX_ILLUSTRATION_CONTENT_CHARS]
    return (
        f"Create {STYLE_DESCRIPTIONS.get(style, STYLE_DESCRIPTIONS['textbook'])} "
        f"for an online course module.\n"
        f"Topic: {excerpt}\n"
        f"Visual style: {VISUAL_STYLE_DESCRIPTIONS.get(visual_style, visual_style)}.\n"
        f"Composition: one clear focal point, uncluttered background, dark theme compatible.\n"
        f"{LABEL_LANGUAGE.get(locale, LABEL_LANGUAGE['en'])}"
    )


def resolve_negative_prompt(override: Optional[str]) -> str:
    return override.strip() if override and override.strip() else DEFAULT_NEGATIVE_PROMPT
