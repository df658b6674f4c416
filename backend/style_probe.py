"""Computed-style and geometry probes run inside a rendered page.

The scripts below only *measure*: they return raw computed values and boxes
for a capped number of elements per category. The ``summarize_*`` functions
turn those measurements into the facts the prompt reports (target-size
compliance, label visibility, hover-only tooltips, relative units, spacing
violations), so every threshold lives in Python.
"""

import re
from itertools import combinations

from dom_extractor import (
    MOBILE_HTML_CHAR_LIMIT,
    MOBILE_TEXT_LIMIT,
    collapse_whitespace,
    extract_mobile_structure,
    truncate,
)
from models import MobileData, StyleAnalysis

DESKTOP_TARGET_MINIMUM = 24
MOBILE_TARGET_MINIMUM = 44
SPACING_MINIMUM = 8
BODY_FONT_MINIMUM = 16

MAX_ANIMATION_DETAILS = 10
MAX_SPACING_ISSUES = 10
MAX_TOUCH_DETAILS = 30
MAX_BREAKPOINTS = 5
BASIC_MOBILE_TEXT_LIMIT = 10_000
BASIC_MOBILE_HTML_LIMIT = 50_000

_RELATIVE_UNIT = re.compile(r"^-?[\d.]+(r?em)$")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

# Shared in-page helpers, prepended to each probe.
_HELPERS_JS = """
  const cut = (value, n) => (value || '').toString().trim().substring(0, n);
  const isShown = (el) => {
    const s = window.getComputedStyle(el);
    return s.display !== 'none' && s.visibility !== 'hidden' && parseFloat(s.opacity) !== 0;
  };
  const box = (el) => {
    const r = el.getBoundingClientRect();
    const s = window.getComputedStyle(el);
    return {
      x: r.x, y: r.y, width: r.width, height: r.height,
      paddingTop: s.paddingTop, paddingRight: s.paddingRight,
      paddingBottom: s.paddingBottom, paddingLeft: s.paddingLeft,
    };
  };
"""

DESKTOP_STYLE_PROBE_JS = (
    "() => {"
    + _HELPERS_JS
    + """
  const bodyStyles = window.getComputedStyle(document.body);

  const links = Array.from(document.querySelectorAll('a')).slice(0, 30).map((link) => {
    const s = window.getComputedStyle(link);
    return {
      text: cut(link.textContent, 50),
      href: link.getAttribute('href') || '',
      textDecoration: s.textDecorationLine || s.textDecoration,
      fontWeight: s.fontWeight,
      color: s.color,
      backgroundColor: s.backgroundColor,
      fontSize: s.fontSize,
    };
  });

  const errorNodes = new Set();
  const errorMessages = [];
  const controls = Array.from(document.querySelectorAll('input, select, textarea')).slice(0, 20);
  const formElements = controls.map((input) => {
    const s = window.getComputedStyle(input);
    const labelledBy = (input.getAttribute('aria-labelledby') || '')
      .split(/\\s+/).filter(Boolean)
      .map((id) => document.getElementById(id)).filter(Boolean)
      .map((el) => ({ text: cut(el.textContent, 50), visible: isShown(el) }));

    const parent = input.closest('form, fieldset, div');
    if (parent) {
      parent.querySelectorAll('[role="alert"], .error, .invalid, [aria-invalid="true"]').forEach((err) => {
        if (errorNodes.has(err) || errorNodes.size >= 20) return;
        errorNodes.add(err);
        const es = window.getComputedStyle(err);
        errorMessages.push({
          inputType: input.type || input.tagName.toLowerCase(),
          message: cut(err.textContent, 100),
          color: es.color,
          backgroundColor: es.backgroundColor,
          fontSize: es.fontSize,
          isVisible: isShown(err),
        });
      });
    }

    return {
      type: input.type || input.tagName.toLowerCase(),
      name: input.name || '',
      id: input.id || '',
      placeholder: input.getAttribute('placeholder') || '',
      placeholderColor: input.matches(':placeholder-shown') ? s.color : '',
      color: s.color,
      backgroundColor: s.backgroundColor,
      borderColor: s.borderColor,
      fontSize: s.fontSize,
      labels: Array.from(input.labels || []).map((l) => ({ text: cut(l.textContent, 50), visible: isShown(l) })),
      ariaLabel: input.getAttribute('aria-label') || '',
      labelledBy: labelledBy,
    };
  });

  const spacingOf = (el) => {
    const s = window.getComputedStyle(el);
    return { lineHeight: s.lineHeight, letterSpacing: s.letterSpacing, fontSize: s.fontSize };
  };
  const spacing = {
    body: spacingOf(document.body),
    paragraphs: Array.from(document.querySelectorAll('p')).slice(0, 10).map(spacingOf),
  };

  const targets = Array.from(document.querySelectorAll(
    'button, a, input, select, [role="button"], [role="link"], [tabindex]:not([tabindex="-1"])'
  )).slice(0, 30).map((el) => Object.assign(
    { tag: el.tagName.toLowerCase(), text: cut(el.textContent, 40) }, box(el)
  ));

  const pseudoRuleFor = (el, pseudo) => {
    for (const sheet of Array.from(document.styleSheets)) {
      let rules;
      try { rules = sheet.cssRules || []; } catch (e) { continue; }
      for (const rule of Array.from(rules)) {
        if (rule.type !== CSSRule.STYLE_RULE || !rule.selectorText) continue;
        for (const part of rule.selectorText.split(',')) {
          if (!part.includes(pseudo)) continue;
          const base = part.split(pseudo).join('').trim() || '*';
          try {
            if (el.matches(base)) {
              return {
                color: rule.style.color || null,
                backgroundColor: rule.style.backgroundColor || null,
                borderColor: rule.style.borderColor || null,
                textDecoration: rule.style.textDecoration || null,
              };
            }
          } catch (e) { /* selector not matchable without the pseudo-class */ }
        }
      }
    }
    return null;
  };

  const interactive = Array.from(document.querySelectorAll(
    'button, a, input[type="button"], input[type="submit"], [role="button"], [title], [data-tooltip], [aria-label]'
  )).slice(0, 25).map((el) => {
    const live = window.getComputedStyle(el);
    const normal = {
      color: live.color, backgroundColor: live.backgroundColor,
      borderColor: live.borderColor, boxShadow: live.boxShadow,
      opacity: live.opacity, cursor: live.cursor,
    };
    el.focus({ preventScroll: true });
    const f = window.getComputedStyle(el);
    const focus = {
      outlineStyle: f.outlineStyle, outlineWidth: f.outlineWidth, outlineColor: f.outlineColor,
      color: f.color, backgroundColor: f.backgroundColor, boxShadow: f.boxShadow,
    };
    el.blur();
    return {
      tag: el.tagName.toLowerCase(),
      text: cut(el.textContent, 50),
      normal: normal,
      hover: pseudoRuleFor(el, ':hover'),
      active: pseudoRuleFor(el, ':active'),
      focus: focus,
      disabled: !!el.disabled || el.getAttribute('aria-disabled') === 'true',
      title: el.getAttribute('title') || '',
      ariaLabel: el.getAttribute('aria-label') || '',
      ariaDescribedBy: el.getAttribute('aria-describedby') || '',
      hasTooltip: el.hasAttribute('data-tooltip') || !!el.querySelector('[class*="tooltip"]'),
    };
  });

  const animations = [];
  const transitions = [];
  Array.from(document.querySelectorAll('*')).slice(0, 50).forEach((el) => {
    const s = window.getComputedStyle(el);
    const className = typeof el.className === 'string' ? el.className : '';
    if (s.animationName && s.animationName !== 'none') {
      animations.push({
        element: el.tagName.toLowerCase(), className: className,
        name: s.animationName, duration: s.animationDuration,
        iterationCount: s.animationIterationCount,
      });
    }
    if (s.transitionProperty && s.transitionProperty !== 'none' && s.transitionDuration !== '0s') {
      transitions.push({
        element: el.tagName.toLowerCase(), className: className,
        property: s.transitionProperty, duration: s.transitionDuration,
      });
    }
  });

  const indicators = Array.from(document.querySelectorAll(
    '[class*="status"], [class*="error"], [class*="success"], [class*="warning"]'
  )).slice(0, 15).map((el) => {
    const s = window.getComputedStyle(el);
    return {
      element: el.tagName.toLowerCase(),
      text: cut(el.textContent, 50),
      hasIcon: !!el.querySelector('svg, img, [class*="icon"]'),
      color: s.color,
      backgroundColor: s.backgroundColor,
    };
  });

  const uiComponents = Array.from(document.querySelectorAll(
    'button, input, select, [role="button"], [role="checkbox"], [role="radio"]'
  )).slice(0, 15).map((el) => {
    const s = window.getComputedStyle(el);
    return {
      element: el.tagName.toLowerCase(),
      text: cut(el.textContent, 30),
      borderColor: s.borderColor,
      backgroundColor: s.backgroundColor,
      borderWidth: s.borderWidth,
    };
  });

  return {
    bodyColor: bodyStyles.color,
    linkTotal: document.querySelectorAll('a').length,
    links: links,
    formTotal: document.querySelectorAll('input, select, textarea').length,
    formElements: formElements,
    errorMessages: errorMessages,
    spacing: spacing,
    targets: targets,
    interactive: interactive,
    animations: animations,
    transitions: transitions,
    indicators: indicators,
    uiComponents: uiComponents,
  };
}"""
)

MOBILE_PROBE_JS = (
    "() => {"
    + _HELPERS_JS
    + """
  const viewportMeta = document.querySelector('meta[name="viewport"]');
  const seen = new Set();
  const touchCandidates = [];
  ['button', 'a', 'input', 'select', 'textarea', '[role="button"]', '[tabindex]'].forEach((selector) => {
    Array.from(document.querySelectorAll(selector)).slice(0, 20).forEach((el) => {
      if (seen.has(el)) return;
      seen.add(el);
      touchCandidates.push(Object.assign({
        tag: el.tagName.toLowerCase(),
        text: cut(el.textContent, 50),
        fontSize: window.getComputedStyle(el).fontSize,
        ariaLabel: el.getAttribute('aria-label') || '',
        title: el.getAttribute('title') || '',
      }, box(el)));
    });
  });

  const mediaQueries = [];
  Array.from(document.styleSheets).forEach((sheet) => {
    let rules;
    try { rules = sheet.cssRules || []; } catch (e) { return; }
    Array.from(rules).forEach((rule) => {
      if (rule.type === CSSRule.MEDIA_RULE) mediaQueries.push(rule.media.mediaText);
    });
  });

  const body = window.getComputedStyle(document.body);
  return {
    viewport: {
      width: window.innerWidth,
      height: window.innerHeight,
      metaTag: viewportMeta ? viewportMeta.getAttribute('content') : null,
      hasViewportMeta: !!viewportMeta,
    },
    touchCandidates: touchCandidates,
    mediaQueries: mediaQueries,
    bodyFontSize: body.fontSize,
    bodyLineHeight: body.lineHeight,
    bodyLetterSpacing: body.letterSpacing,
    textContent: document.body.innerText || '',
    linkTotal: document.querySelectorAll('a').length,
    links: Array.from(document.querySelectorAll('a')).slice(0, 20).map((link) => {
      const s = window.getComputedStyle(link);
      return {
        text: cut(link.textContent, 50),
        textDecoration: s.textDecorationLine || s.textDecoration,
        fontWeight: s.fontWeight,
        fontSize: s.fontSize,
      };
    }),
  };
}"""
)

MOBILE_BASIC_PROBE_JS = """() => {
  const viewportMeta = document.querySelector('meta[name="viewport"]');
  const body = window.getComputedStyle(document.body);
  return {
    viewport: {
      width: window.innerWidth,
      height: window.innerHeight,
      metaTag: viewportMeta ? viewportMeta.getAttribute('content') : null,
      hasViewportMeta: !!viewportMeta,
    },
    interactiveTotal: document.querySelectorAll('button, a, input, select, textarea').length,
    bodyFontSize: body.fontSize,
    bodyLineHeight: body.lineHeight,
    textContent: document.body.innerText || '',
    html: document.documentElement.outerHTML,
  };
}"""


def _px(value, default: float = 0.0) -> float:
    """Leading number of a CSS length such as '12.5px'; ``default`` otherwise."""
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER.match(str(value or "").strip())
    return float(match.group(0)) if match else default


def is_relative_unit(value: str | None) -> bool:
    """True for em/rem lengths and the 'normal'/'inherit' keywords."""
    text = str(value or "").strip().lower()
    if text in {"normal", "inherit"}:
        return True
    return bool(_RELATIVE_UNIT.match(text))


def effective_size(raw: dict) -> tuple[int, int]:
    """Box size plus padding on each axis, rounded to whole pixels."""
    width = _px(raw.get("width")) + _px(raw.get("paddingLeft")) + _px(raw.get("paddingRight"))
    height = _px(raw.get("height")) + _px(raw.get("paddingTop")) + _px(raw.get("paddingBottom"))
    return round(width), round(height)


def meets_target_size(width: float, height: float, minimum: int) -> bool:
    return width >= minimum and height >= minimum


def has_visible_label(control: dict) -> bool:
    if any(label.get("visible") for label in control.get("labels") or []):
        return True
    if str(control.get("ariaLabel") or "").strip():
        return True
    return any(target.get("visible") for target in control.get("labelledBy") or [])


def _label_text(control: dict) -> str:
    if str(control.get("ariaLabel") or "").strip():
        return control["ariaLabel"].strip()
    for source in (control.get("labels") or [], control.get("labelledBy") or []):
        for label in source:
            if label.get("visible") and label.get("text"):
                return label["text"]
    return ""


def is_hover_only(element: dict) -> bool:
    """A title tooltip with no aria-label/aria-describedby alternative."""
    return bool(element.get("title")) and not element.get("ariaLabel") and not element.get("ariaDescribedBy")


def find_spacing_violations(elements: list[dict], minimum: int = SPACING_MINIMUM) -> list[dict]:
    """Pairs whose origins are closer than ``minimum`` on both axes."""
    issues = []
    for first, second in combinations(elements, 2):
        distance_x = abs(_px(first.get("x")) - _px(second.get("x")))
        distance_y = abs(_px(first.get("y")) - _px(second.get("y")))
        if distance_x < minimum and distance_y < minimum:
            issues.append(
                {
                    "element1": str(first.get("text") or "")[:30],
                    "element2": str(second.get("text") or "")[:30],
                    "distance": round(min(distance_x, distance_y)),
                }
            )
    return issues


def _is_bold(font_weight) -> bool:
    return str(font_weight) == "bold" or _px(font_weight) >= 600


def _spacing_fact(raw: dict) -> dict:
    return {
        "line_height": raw.get("lineHeight", ""),
        "letter_spacing": raw.get("letterSpacing", ""),
        "font_size": raw.get("fontSize", ""),
        "line_height_allows_override": is_relative_unit(raw.get("lineHeight")),
        "letter_spacing_allows_override": is_relative_unit(raw.get("letterSpacing")),
    }


def _target_facts(raw_targets: list[dict], minimum: int) -> list[dict]:
    facts = []
    for raw in raw_targets:
        width, height = effective_size(raw)
        facts.append(
            {
                "tag": raw.get("tag", ""),
                "text": raw.get("text", ""),
                "x": round(_px(raw.get("x"))),
                "y": round(_px(raw.get("y"))),
                "width": round(_px(raw.get("width"))),
                "height": round(_px(raw.get("height"))),
                "effective_width": width,
                "effective_height": height,
                "meets_minimum": meets_target_size(width, height, minimum),
            }
        )
    return facts


def _focus_fact(normal: dict, focus: dict) -> dict:
    has_outline = focus.get("outlineStyle", "none") != "none" and _px(focus.get("outlineWidth")) > 0
    shadow_changed = focus.get("boxShadow", "none") not in ("none", normal.get("boxShadow"))
    has_visible_focus = has_outline or shadow_changed
    return {
        "outline": f"{focus.get('outlineWidth', '')} {focus.get('outlineStyle', '')} {focus.get('outlineColor', '')}".strip(),
        "color": focus.get("color"),
        "background_color": focus.get("backgroundColor"),
        "has_visible_focus": has_visible_focus,
        "is_distinct_from_normal": (
            has_visible_focus
            or focus.get("color") != normal.get("color")
            or focus.get("backgroundColor") != normal.get("backgroundColor")
        ),
    }


def summarize_desktop_styles(raw: dict, target_minimum: int = DESKTOP_TARGET_MINIMUM) -> StyleAnalysis:
    """Turn the desktop probe's raw measurements into reportable facts."""
    body_color = raw.get("bodyColor")

    links = []
    for link in raw.get("links") or []:
        has_underline = "underline" in str(link.get("textDecoration") or "")
        is_bold = _is_bold(link.get("fontWeight"))
        links.append(
            {
                "text": link.get("text", ""),
                "href": link.get("href", ""),
                "has_underline": has_underline,
                "is_bold": is_bold,
                "color": link.get("color"),
                "background_color": link.get("backgroundColor"),
                "font_size": link.get("fontSize"),
                "is_distinguishable": has_underline or is_bold or link.get("color") != body_color,
            }
        )

    form_elements = []
    for control in raw.get("formElements") or []:
        form_elements.append(
            {
                "type": control.get("type", ""),
                "name": control.get("name", ""),
                "id": control.get("id", ""),
                "placeholder": control.get("placeholder", ""),
                "placeholder_color": control.get("placeholderColor", ""),
                "color": control.get("color"),
                "background_color": control.get("backgroundColor"),
                "border_color": control.get("borderColor"),
                "font_size": control.get("fontSize"),
                "has_label": bool(
                    control.get("labels") or control.get("ariaLabel") or control.get("labelledBy")
                ),
                "label_visible": has_visible_label(control),
                "label_text": _label_text(control)[:50],
            }
        )

    error_messages = [
        {
            "input_type": err.get("inputType", ""),
            "message": err.get("message", ""),
            "color": err.get("color"),
            "background_color": err.get("backgroundColor"),
            "font_size": err.get("fontSize"),
            "is_visible": bool(err.get("isVisible")),
        }
        for err in raw.get("errorMessages") or []
    ]

    spacing = raw.get("spacing") or {}
    targets = _target_facts(raw.get("targets") or [], target_minimum)

    interactive = []
    hover_only = []
    for el in raw.get("interactive") or []:
        normal = el.get("normal") or {}
        if is_hover_only(el):
            hover_only.append(
                {"element": el.get("tag", ""), "text": str(el.get("text") or "")[:40], "tooltip": el.get("title")}
            )
        interactive.append(
            {
                "tag": el.get("tag", ""),
                "text": el.get("text", ""),
                "normal": {
                    "color": normal.get("color"),
                    "background_color": normal.get("backgroundColor"),
                    "border_color": normal.get("borderColor"),
                },
                "hover": el.get("hover"),
                "active": el.get("active"),
                "focus": _focus_fact(normal, el.get("focus") or {}),
                "disabled": (
                    {"color": normal.get("color"), "opacity": normal.get("opacity"), "cursor": normal.get("cursor")}
                    if el.get("disabled")
                    else None
                ),
                "has_title": bool(el.get("title")),
                "has_aria_label": bool(el.get("ariaLabel")),
                "has_tooltip": bool(el.get("hasTooltip")),
            }
        )

    animations = [
        {
            "element": a.get("element", ""),
            "class_name": a.get("className", ""),
            "name": a.get("name", ""),
            "duration": a.get("duration", ""),
            "iteration_count": a.get("iterationCount", ""),
        }
        for a in raw.get("animations") or []
    ]
    transitions = [
        {
            "element": t.get("element", ""),
            "class_name": t.get("className", ""),
            "property": t.get("property", ""),
            "duration": t.get("duration", ""),
        }
        for t in raw.get("transitions") or []
    ]

    indicators = []
    for ind in raw.get("indicators") or []:
        has_text = bool(str(ind.get("text") or "").strip())
        has_icon = bool(ind.get("hasIcon"))
        indicators.append(
            {
                "element": ind.get("element", ""),
                "text": ind.get("text", ""),
                "has_icon": has_icon,
                "has_text": has_text,
                "relies_on_color_alone": (
                    not has_icon
                    and not has_text
                    and (ind.get("color") != "rgb(0, 0, 0)" or ind.get("backgroundColor") != "rgba(0, 0, 0, 0)")
                ),
                "color": ind.get("color"),
                "background_color": ind.get("backgroundColor"),
            }
        )

    ui_components = [
        {
            "element": comp.get("element", ""),
            "text": comp.get("text", ""),
            "border_color": comp.get("borderColor"),
            "background_color": comp.get("backgroundColor"),
            "has_border": _px(comp.get("borderWidth")) > 0,
        }
        for comp in raw.get("uiComponents") or []
    ]

    return {
        "links": {"total": raw.get("linkTotal", len(links)), "analyzed": len(links), "details": links},
        "form_elements": {
            "total": raw.get("formTotal", len(form_elements)),
            "analyzed": len(form_elements),
            "details": form_elements,
        },
        "error_messages": {"total": len(error_messages), "details": error_messages},
        "spacing": {
            "body": _spacing_fact(spacing.get("body") or {}),
            "paragraphs": [_spacing_fact(p) for p in spacing.get("paragraphs") or []],
        },
        "target_sizes": {
            "minimum": target_minimum,
            "total": len(targets),
            "compliant": sum(1 for t in targets if t["meets_minimum"]),
            "non_compliant": [t for t in targets if not t["meets_minimum"]],
            "details": targets,
        },
        "interactive_states": {"total": len(interactive), "details": interactive},
        "hover_only_info": {"total": len(hover_only), "details": hover_only},
        "animations": {"total": len(animations), "details": animations[:MAX_ANIMATION_DETAILS]},
        "transitions": {"total": len(transitions), "details": transitions[:MAX_ANIMATION_DETAILS]},
        "color_only_indicators": {"total": len(indicators), "details": indicators},
        "ui_components": {"total": len(ui_components), "details": ui_components},
    }


def _typography(raw: dict) -> dict:
    body_font_size = int(_px(raw.get("bodyFontSize"), 16)) or 16
    return {
        "body_font_size": body_font_size,
        "body_line_height": _px(raw.get("bodyLineHeight"), 1.5) or 1.5,
        "meets_minimum": body_font_size >= BODY_FONT_MINIMUM,
    }


def summarize_mobile(raw: dict, html: str, target_minimum: int = MOBILE_TARGET_MINIMUM) -> MobileData:
    """Mobile facts from the full mobile probe plus the mobile-rendered HTML."""
    targets = _target_facts(raw.get("touchCandidates") or [], target_minimum)
    spacing_issues = find_spacing_violations(targets)
    media_queries = [m for m in raw.get("mediaQueries") or [] if "max-width" in m or "min-width" in m]

    links = [
        {
            "text": link.get("text", ""),
            "has_underline": "underline" in str(link.get("textDecoration") or ""),
            "is_bold": _is_bold(link.get("fontWeight")),
            "font_size": link.get("fontSize"),
        }
        for link in raw.get("links") or []
    ]

    return {
        "degraded": False,
        "viewport": _viewport_fact(raw.get("viewport") or {}),
        "touch_targets": {
            "minimum": target_minimum,
            "total": len(targets),
            "compliant": sum(1 for t in targets if t["meets_minimum"]),
            "non_compliant": [
                {
                    "element": t["text"][:50],
                    "size": f"{t['effective_width']}x{t['effective_height']}px",
                    "required": f"{target_minimum}x{target_minimum}px minimum",
                }
                for t in targets
                if not t["meets_minimum"]
            ],
            "details": targets[:MAX_TOUCH_DETAILS],
        },
        "spacing": {
            "minimum": SPACING_MINIMUM,
            "total": len(spacing_issues),
            "issues": spacing_issues[:MAX_SPACING_ISSUES],
        },
        "responsive": {
            "has_mobile_media_queries": bool(media_queries),
            "breakpoints": media_queries[:MAX_BREAKPOINTS],
        },
        "typography": _typography(raw),
        "text_content": truncate(collapse_whitespace(raw.get("textContent")), MOBILE_TEXT_LIMIT),
        "html": truncate(html, MOBILE_HTML_CHAR_LIMIT),
        "structured_data": extract_mobile_structure(html),
        "style_analysis": {
            "links": {"total": raw.get("linkTotal", len(links)), "details": links},
            "spacing": {
                "body": {
                    "line_height": raw.get("bodyLineHeight", ""),
                    "letter_spacing": raw.get("bodyLetterSpacing", ""),
                }
            },
        },
    }


def summarize_basic_mobile(raw: dict) -> MobileData:
    """Reduced mobile facts: viewport and interactive-element count only."""
    return {
        "degraded": True,
        "viewport": _viewport_fact(raw.get("viewport") or {}),
        "touch_targets": {
            "minimum": MOBILE_TARGET_MINIMUM,
            "total": int(raw.get("interactiveTotal") or 0),
            "compliant": 0,
            "non_compliant": [],
            "details": [],
        },
        "spacing": {"minimum": SPACING_MINIMUM, "total": 0, "issues": []},
        "responsive": {"has_mobile_media_queries": False, "breakpoints": []},
        "typography": _typography(raw),
        "text_content": truncate(collapse_whitespace(raw.get("textContent")), BASIC_MOBILE_TEXT_LIMIT),
        "html": truncate(raw.get("html"), BASIC_MOBILE_HTML_LIMIT),
        "structured_data": None,
        "style_analysis": None,
    }


def _viewport_fact(raw: dict) -> dict:
    return {
        "width": raw.get("width"),
        "height": raw.get("height"),
        "meta_tag": raw.get("metaTag"),
        "has_viewport_meta": bool(raw.get("hasViewportMeta")),
    }


def probe_desktop_styles(page) -> StyleAnalysis:
    return summarize_desktop_styles(page.evaluate(DESKTOP_STYLE_PROBE_JS))


def probe_mobile(page) -> MobileData:
    raw = page.evaluate(MOBILE_PROBE_JS)
    return summarize_mobile(raw, page.content())


def probe_mobile_basic(page) -> MobileData:
    return summarize_basic_mobile(page.evaluate(MOBILE_BASIC_PROBE_JS))
