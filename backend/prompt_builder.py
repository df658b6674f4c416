"""Render a Snapshot and the selected checklist into one audit prompt.

Pure and deterministic: identical inputs give an identical prompt. Every
optional snapshot block has a fallback sentence so the model always knows
which facts are missing rather than silently lacking them.
"""

from typing import Iterable

from models import Snapshot
from schemas import AuditCategory

HTML_SAMPLE_CHARS = 10_000
MOBILE_HTML_SAMPLE_CHARS = 5_000
PSI_AUDIT_LIMIT = 30

SYSTEM_MESSAGE = """You are an expert UX/UI auditor and web accessibility specialist.
Return ONLY one valid raw JSON object that matches the requested structure exactly.
Do not include markdown, code fences, or text outside JSON."""

AUDIT_INSTRUCTIONS = """AUDIT INSTRUCTIONS:
THOROUGHLY examine ALL the provided content. Important considerations:
- Many modern websites use lazy-loading, JavaScript rendering, and dynamic content
- Look carefully for: image tags with client logos, testimonial sections, team info, case studies
- Check class names, section headings, alt text, and content structure
- If you find evidence of something (like logo images or testimonial text), report it ACCURATELY
- If you CANNOT verify something from the HTML (may be JS-loaded), state "Cannot verify from static HTML - may be dynamically loaded"
- DO NOT assume something is missing just because it's not immediately obvious
- Be precise and honest about what you can and cannot see in the code

Analyze ONLY the following checked items and provide detailed findings, issues, and recommendations for each:"""

OUTPUT_CONTRACT = """CRITICAL: YOU MUST RESPOND WITH VALID JSON ONLY. NO MARKDOWN, NO EXPLANATIONS, NO BACKTICKS.

FORMAT YOUR RESPONSE AS THIS EXACT JSON STRUCTURE:
{
  "categories": [
    {
      "title": "Category Name",
      "items": [
        {
          "label": "Item label",
          "status": "good",
          "findings": "Detailed description",
          "issues": ["Issue 1", "Issue 2"],
          "recommendations": ["Recommendation 1", "Recommendation 2"],
          "screenshotRequest": "optional - element or area that would benefit from a screenshot"
        }
      ]
    }
  ]
}

STRICT JSON RULES:
1. Start with { and end with }
2. All strings must be in double quotes "
3. All arrays must be properly closed with ]
4. All objects must be properly closed with }
5. Use "good", "warning", or "critical" for status (lowercase, in quotes)
6. Escape any quotes in text content with \\"
7. Do NOT include markdown code blocks
8. Do NOT include any text before or after the JSON
9. Do NOT leave a trailing comma before a closing ] or }
10. If content is very long, truncate it rather than breaking JSON structure

IMPORTANT:
- Be specific and actionable in your recommendations
- Use "good" status for things done well, "warning" for minor issues, "critical" for serious problems
- Provide code examples or specific changes where relevant
- If you cannot assess something (like actual performance metrics), state that clearly
- Only add "screenshotRequest" to an item when a visual of a specific element would clarify the issue

RESPOND WITH ONLY THE JSON OBJECT, NOTHING ELSE."""


def _yes_no(value) -> str:
    return "Yes" if value else "No"


def _na(value) -> str:
    return "N/A" if value is None or value == "" else str(value)


def _bullets(lines: Iterable[str], title: str) -> list[str]:
    lines = list(lines)
    return [f"\n{title}:", *lines] if lines else []


def _content_block(url: str, snapshot: Snapshot) -> list[str]:
    data = snapshot.structured_data
    headings = data["headings"]
    images = data["images"]
    return [
        f"WEBSITE URL: {url}",
        f"RENDER MODE: {snapshot.render_mode}",
        "",
        "WEBSITE CONTENT:",
        f"Title: {data['title']}",
        f"Meta Description: {data['meta_description']}",
        "",
        "HEADINGS:",
        f"H1: {', '.join(headings['h1'])}",
        f"H2: {', '.join(headings['h2'][:10])}",
        f"H3: {', '.join(headings['h3'][:10])}",
        "",
        "TEXT CONTENT:",
        data["text_content"],
        "",
        f"IMAGES FOUND: {len(images)} images",
        *[f"- {img['alt'] or 'No alt text'}: {img['src'] or 'no src'}" for img in images[:10]],
        "",
        f"LINKS FOUND: {len(data['links'])} links",
        f"CTAs: {sum(1 for link in data['links'] if link['is_cta'])}",
        "",
        f"FORMS: {data['forms']}",
        f"BUTTONS: {len(data['buttons'])}",
        "",
        "HTML STRUCTURE (sample):",
        snapshot.html[:HTML_SAMPLE_CHARS],
    ]


def _style_block(style) -> list[str]:
    header = "=== DESKTOP CSS & RENDERED HTML ANALYSIS ==="
    if not style:
        return [header, "CSS analysis data unavailable. Analyze from static content and HTML structure only."]

    links = style["links"]
    forms = style["form_elements"]
    errors = style["error_messages"]
    body = style["spacing"]["body"]
    targets = style["target_sizes"]
    states = style["interactive_states"]
    hover = style["hover_only_info"]
    animations = style["animations"]
    transitions = style["transitions"]
    indicators = style["color_only_indicators"]
    components = style["ui_components"]

    lines = [
        header,
        "Computed CSS styles and rendered HTML facts for accessibility assessment.",
        "",
        "LINK ANALYSIS (Distinguishability):",
        f"- Total Links: {links['total']}",
        f"- Analyzed: {links['analyzed']}",
    ]
    lines += _bullets(
        (
            f"  - \"{link['text'][:40]}\": {'Has underline' if link['has_underline'] else 'No underline'}, "
            f"{'Bold' if link['is_bold'] else 'Not bold'}, Color: {link['color']}, "
            f"Font size: {link['font_size']}, Distinguishable: {_yes_no(link['is_distinguishable'])}"
            for link in links["details"][:15]
        ),
        "Link Details",
    )
    lines += [
        "",
        "FORM ELEMENTS & ERROR MESSAGES:",
        f"- Total Form Elements: {forms['total']}",
        f"- Analyzed: {forms['analyzed']}",
    ]
    lines += _bullets(
        (
            f"  - {el['type']} ({el['name'] or el['id'] or 'unnamed'}): Placeholder: \"{el['placeholder']}\", "
            f"Has label: {_yes_no(el['has_label'])}, Label visible: {_yes_no(el['label_visible'])}, "
            f"Label text: \"{el['label_text']}\", Color: {el['color']}, Background: {el['background_color']}"
            for el in forms["details"][:10]
        ),
        "Form Element Details",
    )
    lines.append(f"- Error Messages Found: {errors['total']}")
    lines += _bullets(
        (
            f"  - For {err['input_type']}: \"{err['message'][:50]}\", Color: {err['color']}, "
            f"Visible: {_yes_no(err['is_visible'])}"
            for err in errors["details"][:5]
        ),
        "Error Message Details",
    )
    lines += [
        "",
        "SPACING ANALYSIS (Line-height, Letter-spacing):",
        "Body:",
        f"- Line-height: {body['line_height']} (Allows user override: "
        f"{'Yes - uses relative units' if body['line_height_allows_override'] else 'No - uses fixed units'})",
        f"- Letter-spacing: {body['letter_spacing']} (Allows user override: "
        f"{'Yes - uses relative units' if body['letter_spacing_allows_override'] else 'No - uses fixed units'})",
        f"- Font-size: {body['font_size']}",
    ]
    lines += _bullets(
        (
            f"  Paragraph {i}: Line-height: {p['line_height']} (Override: {_yes_no(p['line_height_allows_override'])}), "
            f"Letter-spacing: {p['letter_spacing']} (Override: {_yes_no(p['letter_spacing_allows_override'])}), "
            f"Font-size: {p['font_size']}"
            for i, p in enumerate(style["spacing"]["paragraphs"][:5], start=1)
        ),
        "Paragraph Samples",
    )
    minimum = targets["minimum"]
    lines += [
        "",
        f"TARGET SIZE ANALYSIS (Desktop - minimum {minimum}x{minimum}px for clickable areas, size plus padding):",
        f"- Total Clickable Elements Analyzed: {targets['total']}",
        f"- Compliant (>={minimum}x{minimum}px): {targets['compliant']}",
        f"- Non-Compliant: {len(targets['non_compliant'])}",
    ]
    lines += _bullets(
        (
            f"  - {t['tag']} \"{t['text'][:30]}\": {t['effective_width']}x{t['effective_height']}px "
            f"(required: {minimum}x{minimum}px minimum)"
            for t in targets["non_compliant"][:10]
        ),
        "Non-Compliant Target Sizes",
    )
    lines += [
        "",
        "INTERACTIVE ELEMENT STATES (Hover, Focus, Active, Disabled):",
        f"- Total Analyzed: {states['total']}",
    ]
    lines += _bullets(
        (
            f"  - {el['tag']} \"{el['text'][:30]}\": Hover state: {'Present' if el['hover'] else 'Not detected'}, "
            f"Focus outline: {el['focus']['outline']}, Has visible focus: {_yes_no(el['focus']['has_visible_focus'])}, "
            f"Focus distinct from normal: {_yes_no(el['focus']['is_distinct_from_normal'])}, "
            f"Active state: {'Present' if el['active'] else 'Not detected'}, Disabled: {_yes_no(el['disabled'])}, "
            f"Has title: {_yes_no(el['has_title'])}, Has aria-label: {_yes_no(el['has_aria_label'])}"
            for el in states["details"][:10]
        ),
        "Element State Details",
    )
    lines += [
        "",
        "HOVER-ONLY INFO DETECTION:",
        f"- Elements with Potential Hover-Only Info: {hover['total']}",
    ]
    lines += _bullets(
        (
            f"  - {info['element']} \"{info['text'][:30]}\": Tooltip=\"{info['tooltip']}\" - "
            "only available on hover, not to keyboard or assistive technology users"
            for info in hover["details"][:10]
        ),
        "Hover-Only Info Issues (title attribute without aria-label or aria-describedby)",
    ) or ["None detected"]
    lines += ["", "ANIMATIONS & TRANSITIONS:", f"- Animations Found: {animations['total']}"]
    lines += _bullets(
        (
            f"  - {a['element']} ({a['class_name']}): {a['name']}, Duration: {a['duration']}, "
            f"Iterations: {a['iteration_count']}"
            for a in animations["details"][:5]
        ),
        "Animation Details",
    )
    lines.append(f"- Transitions Found: {transitions['total']}")
    lines += _bullets(
        (
            f"  - {t['element']} ({t['class_name']}): {t['property']}, Duration: {t['duration']}"
            for t in transitions["details"][:5]
        ),
        "Transition Details",
    )
    lines += ["", "COLOR-ONLY INDICATORS (Status indicators that rely on color alone):", f"- Total Found: {indicators['total']}"]
    lines += _bullets(
        (
            f"  - {ind['element']} \"{ind['text'][:30]}\": Has icon: {_yes_no(ind['has_icon'])}, "
            f"Has text: {_yes_no(ind['has_text'])}, Relies on color alone: "
            f"{'YES (ISSUE)' if ind['relies_on_color_alone'] else 'No'}, Color: {ind['color']}"
            for ind in indicators["details"][:10]
        ),
        "Color-Only Indicator Details",
    )
    lines += ["", "NON-TEXT CONTRAST (UI Components):", f"- Total UI Components Analyzed: {components['total']}"]
    lines += _bullets(
        (
            f"  - {c['element']} \"{c['text'][:30]}\": Border color: {c['border_color']}, "
            f"Background: {c['background_color']}, Has border: {_yes_no(c['has_border'])}"
            for c in components["details"][:10]
        ),
        "UI Component Details",
    )
    lines += [
        "",
        "Use this CSS data for link distinguishability, label visibility, relative-unit spacing, "
        "target sizes, interactive states, hover-only info, motion, color-only indicators and non-text contrast.",
    ]
    return lines


def _reflow_block(reflow) -> list[str]:
    header = "=== REFLOW TEST (320px width) ==="
    if not reflow:
        return [header, "Reflow test data unavailable. Analyze from static content only."]
    return [
        header,
        f"- Viewport Width: {reflow['viewport_width']}px",
        f"- Client Width: {reflow['client_width']}px",
        f"- Scroll Width: {reflow['scroll_width']}px",
        f"- Has Horizontal Scroll: {'YES (ISSUE)' if reflow['has_horizontal_scroll'] else 'No'}",
        f"- Scrollbar Width: {reflow['scrollbar_width']}px",
        f"- Meets Reflow Requirement: {_yes_no(reflow['meets_reflow_requirement'])}",
    ]


def _zoom_block(zoom) -> list[str]:
    header = "=== ZOOM TEST (200%) ==="
    if not zoom:
        return [header, "Zoom test data unavailable. Analyze from static content only."]
    return [
        header,
        f"- Zoom Level: {round(zoom['zoom_level'] * 100)}%",
        f"- Original Content Size: {zoom['original_width']}x{zoom['original_height']}px",
        f"- Zoomed Content Size: {zoom['zoomed_width']}x{zoom['zoomed_height']}px",
        f"- Viewport: {zoom['viewport_width']}x{zoom['viewport_height']}px",
        f"- Has Horizontal Scroll: {'Yes (acceptable)' if zoom['has_horizontal_scroll'] else 'No'}",
        f"- Has Vertical Scroll: {'Yes (acceptable)' if zoom['has_vertical_scroll'] else 'No'}",
        f"- Meets Zoom Requirement: {_yes_no(zoom['meets_zoom_requirement'])}",
        "Scrolling is acceptable at 200%, but content should remain readable and functional.",
    ]


def _mobile_block(mobile) -> list[str]:
    header = "=== MOBILE VIEWPORT ANALYSIS ==="
    if not mobile:
        return [header, "Mobile viewport data unavailable. Analyze from desktop and static content only."]

    viewport = mobile["viewport"]
    touch = mobile["touch_targets"]
    spacing = mobile["spacing"]
    responsive = mobile["responsive"]
    typography = mobile["typography"]
    minimum = touch["minimum"]

    lines = [
        header,
        "Rendered in a 390x844px phone viewport with a mobile user agent.",
    ]
    if mobile["degraded"]:
        lines.append(
            "Only reduced mobile data was captured: touch-target sizes, spacing and style analysis are unavailable."
        )
    lines += [
        "",
        "MOBILE VIEWPORT SETTINGS:",
        f"- Viewport: {_na(viewport['width'])}x{_na(viewport['height'])}px",
        f"- Viewport Meta Tag: {viewport['meta_tag'] or 'Not found'}",
        f"- Has Viewport Meta: {_yes_no(viewport['has_viewport_meta'])}",
        "",
        f"MOBILE TOUCH TARGET ANALYSIS (minimum {minimum}x{minimum}px including padding):",
        f"- Total Interactive Elements: {touch['total']}",
    ]
    if not mobile["degraded"]:
        lines += [
            f"- Compliant: {touch['compliant']}",
            f"- Non-Compliant: {len(touch['non_compliant'])}",
        ]
        lines += _bullets(
            (f"  - \"{t['element']}\": {t['size']} (required: {t['required']})" for t in touch["non_compliant"]),
            "Non-Compliant Touch Targets",
        )
        lines += ["", "MOBILE SPACING ANALYSIS:", f"- Element Pairs Closer Than {spacing['minimum']}px: {spacing['total']}"]
        lines += _bullets(
            (f"  - \"{s['element1']}\" and \"{s['element2']}\": {s['distance']}px apart" for s in spacing["issues"]),
            "Spacing Issues",
        )
        lines += ["", "MOBILE RESPONSIVE DESIGN:", f"- Has Mobile Media Queries: {_yes_no(responsive['has_mobile_media_queries'])}"]
        lines += _bullets((f"  - {b}" for b in responsive["breakpoints"]), "Breakpoints Found")
    lines += [
        "",
        "MOBILE TYPOGRAPHY:",
        f"- Body Font Size: {typography['body_font_size']}px",
        f"- Body Line Height: {typography['body_line_height']}",
        f"- Meets Minimum (16px): {_yes_no(typography['meets_minimum'])}",
    ]

    structure = mobile["structured_data"]
    if structure:
        lines += [
            "",
            "MOBILE CONTENT STRUCTURE:",
            f"- H1 Headings: {', '.join(structure['headings']['h1']) or 'None'}",
            f"- H2 Headings: {', '.join(structure['headings']['h2'][:10]) or 'None'}",
            f"- Buttons Found: {len(structure['buttons'])}",
            f"- Links Found: {len(structure['links'])}",
            f"- Forms Found: {structure['forms']}",
        ]

    lines += ["", "MOBILE TEXT CONTENT:", mobile["text_content"], "", "MOBILE HTML STRUCTURE (sample):", mobile["html"][:MOBILE_HTML_SAMPLE_CHARS]]

    style = mobile["style_analysis"]
    if style:
        lines += ["", "MOBILE CSS ANALYSIS:", f"Links Analyzed: {style['links']['total']}"]
        lines += _bullets(
            (
                f"  - \"{link['text'][:40]}\": {'Has underline' if link['has_underline'] else 'No underline'}, "
                f"{'Bold' if link['is_bold'] else 'Not bold'}, Font size: {link['font_size']}"
                for link in style["links"]["details"][:10]
            ),
            "Mobile Link Details",
        )
        body = style["spacing"]["body"]
        lines += [f"- Line-height: {body['line_height']}", f"- Letter-spacing: {body['letter_spacing']}"]

    lines += [
        "",
        "Use the mobile data for touch targets and mobile-specific items, and compare desktop and mobile where relevant.",
    ]
    return lines


def _psi_audit_score(score) -> str:
    if score is None:
        return "N/A"
    if score == 1:
        return "PASS"
    if score == 0:
        return "FAIL"
    return f"PARTIAL ({round(score * 100)}%)"


def _strategy_lines(metrics, label: str, url: str) -> list[str]:
    if not metrics:
        return [f"{label} PageSpeed Insights data not available."]
    scores = metrics["scores"]
    lines = [
        f"{label.upper()} ANALYSIS (from PageSpeed Insights):",
        f"- Accessibility Score: {_na(scores['accessibility'])}/100",
        f"- Performance Score: {_na(scores['performance'])}/100",
        f"- Best Practices Score: {_na(scores['best_practices'])}/100",
        f"- SEO Score: {_na(scores['seo'])}/100",
        f"- Emulated Form Factor: {metrics['emulated_form_factor'] or metrics['strategy']}",
        f"- Final URL: {metrics['final_url'] or url}",
        "",
        f"ACCESSIBILITY AUDITS ({label}):",
    ]
    audits = list(metrics["accessibility_audits"].values())[:PSI_AUDIT_LIMIT]
    lines += [
        f"  - {a['title']}: {_psi_audit_score(a['score'])}"
        + (f" - {a['display_value']}" if a["display_value"] else "")
        for a in audits
    ] or ["No accessibility audits available"]
    lines += ["", f"PERFORMANCE METRICS ({label}):"]
    lines += [
        f"  - {m['title']}: {_na(m['display_value'])} (Score: "
        f"{'N/A' if m['score'] is None else round(m['score'] * 100)})"
        for m in metrics["performance_metrics"].values()
    ] or ["No performance metrics available"]
    return lines


def _metrics_block(metrics, url: str) -> list[str]:
    header = "=== GOOGLE PAGESPEED INSIGHTS ANALYSIS ==="
    if not metrics:
        return [header, "External lab metrics unavailable. Analyze from captured page data only."]
    return [
        header,
        *_strategy_lines(metrics["mobile"], "Mobile", url),
        "",
        *_strategy_lines(metrics["desktop"], "Desktop", url),
        "",
        "Use PageSpeed Insights data to validate and supplement accessibility findings.",
    ]


def _screenshot_block(screenshot, element_screenshots) -> list[str]:
    if not screenshot and not element_screenshots:
        return []
    lines = ["=== CAPTURED SCREENSHOTS ==="]
    if screenshot:
        lines.append("A full-page screenshot was captured.")
    if element_screenshots:
        lines.append("Element screenshots were captured for: " + ", ".join(element_screenshots))
    return lines


def _checklist_block(checklist: Iterable[AuditCategory]) -> list[str]:
    lines = []
    for category in checklist:
        selected = [item for item in category.items if item.selected]
        if not selected:
            continue
        lines += ["", f"## {category.label.upper()}"]
        for item in selected:
            lines += ["", f"- {item.label}"]
            if item.instruction and item.instruction.strip():
                lines.append(
                    "CUSTOM INSTRUCTIONS (HIGHEST PRIORITY - override default behavior if needed, "
                    f'but keep "{item.label}" as the main assessment context):'
                )
                lines.append(item.instruction.strip())
    return lines


def compile_prompt(url: str, snapshot: Snapshot, checklist: Iterable[AuditCategory]) -> str:
    """Build the full audit prompt for ``snapshot`` and the selected items."""
    sections = [
        _content_block(url, snapshot),
        _style_block(snapshot.style_analysis),
        _reflow_block(snapshot.reflow_test),
        _zoom_block(snapshot.zoom_test),
        _mobile_block(snapshot.mobile_data),
        _metrics_block(snapshot.external_metrics, url),
        _screenshot_block(snapshot.screenshot, snapshot.element_screenshots),
        [AUDIT_INSTRUCTIONS, *_checklist_block(checklist)],
        [OUTPUT_CONTRACT],
    ]
    return "\n\n".join("\n".join(lines) for lines in sections if lines)
