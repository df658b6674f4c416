"""Catalog of the audit checklist: known categories and their items, in order."""

import re

CHECKLIST_CATALOG: list[dict] = [
    {
        "key": "user_journeys",
        "label": "Mapping of the existing user journeys",
        "items": [
            ("critical_journeys", "Identify the most critical user journeys (based on business goals and user frequency)"),
            ("user_types", "Consider different user types"),
            ("pain_points", "Pain Points: Friction, confusion, unnecessary steps, dead ends"),
            ("happy_path", "Map both happy path and alternative/edge case scenarios"),
            ("drop_off_risks", "Drop-off Risks: Where users are likely to abandon the flow"),
            ("cognitive_load", "Cognitive Load: Mental effort required at each step"),
            ("error_handling", "Error Handling: What happens when things go wrong"),
            ("efficiency", "Efficiency: Time and effort required to complete tasks"),
            ("user_emotions", "User emotions and frustrations at different stages"),
            ("mobile_vs_desktop", "Mobile vs. desktop experience differences"),
        ],
    },
    {
        "key": "user_experience",
        "label": "User Experience",
        "items": [
            ("navigation", "Navigation & Information Architecture"),
            ("cta_placement", "Call-to-action placement and clarity"),
            ("hover_states", "Hover states and interactive elements behaviour"),
            ("interactions", "Interactions / animations assessment"),
            ("touch_targets", "Touch target sizing for mobile users"),
            ("conversion_paths", "Primary conversion paths (contact, purchase, signup)"),
            ("trust_elements", "Trust & Credibility Elements"),
            ("loading_states", "Loading states and progress indicators"),
            ("filter_sorting", "Filter and sorting patterns"),
        ],
    },
    {
        "key": "content_assessment",
        "label": "Content Assessment",
        "items": [
            ("message_clarity", "Message clarity and value proposition communication"),
            ("content_relevance", "Content relevance to target audience and user needs"),
            ("writing_quality", "Writing quality, grammar, and professional tone"),
            ("image_quality", "Image quality, relevance, and professional appearance"),
            ("engaging_opening", "Engaging opening that hooks the reader immediately"),
            ("logical_progression", "Logical content progression that guides users through a journey"),
            ("sufficient_detail", "Sufficient detail to answer user questions and build confidence"),
            ("clear_next_steps", "Clear next steps or guidance on what to do after reading"),
            ("personal_touches", "Personal touches that build trust and connection"),
        ],
    },
    {
        "key": "accessibility",
        "label": "Accessibility",
        "items": [
            ("text_contrast", "Text contrast (WCAG AA: 4.5:1 for normal text, 3:1 for large text)"),
            ("non_text_contrast", "Non-text contrast (WCAG 2.1: 3:1 for UI components)"),
            ("placeholder_text", "Placeholder text (must meet contrast ratio)"),
            ("focus_indicator", "Focus indicator (visible and clear, 3:1 contrast)"),
            ("target_size", "Target size (clickable areas at least 24x24px)"),
            ("hover_only_info", "No hover-only info (must appear on focus/keyboard/tap)"),
            ("reflow", "Reflow (content reflows to 320px width without horizontal scrolling)"),
            ("zoom", "Zoom (UI scales up to 200% without breaking)"),
            ("spacing", "Spacing (line height, letter spacing allow overrides)"),
            ("color_alone", "Don't rely on color alone (status indicators need icon/label)"),
            ("links", "Links (distinguishable by underline, bold, etc.)"),
            ("states", "States (hover, active, disabled, focus visually distinct)"),
            ("labels", "Labels (all form fields have visible, persistent labels)"),
            ("error_messages", "Error messages (clear, high-contrast, near relevant input)"),
            ("touch_targets", "Touch targets (enough spacing on mobile to avoid accidental taps)"),
        ],
    },
]

KNOWN_CATEGORIES = tuple(category["key"] for category in CHECKLIST_CATALOG)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(key: str) -> str:
    """'userJourneys' -> 'user_journeys'; already snake keys pass through."""
    return _CAMEL_BOUNDARY.sub("_", str(key).strip()).lower()


def catalog_as_dict() -> list[dict]:
    """The catalog with every item selected, in the request list form."""
    return [
        {
            "key": category["key"],
            "label": category["label"],
            "items": [
                {"key": key, "label": label, "selected": True, "instruction": None}
                for key, label in category["items"]
            ],
        }
        for category in CHECKLIST_CATALOG
    ]
