import pytest

from conftest import SAMPLE_HTML, FakePage
from dom_extractor import MOBILE_TEXT_LIMIT
from style_probe import (
    DESKTOP_STYLE_PROBE_JS,
    DESKTOP_TARGET_MINIMUM,
    MOBILE_TARGET_MINIMUM,
    effective_size,
    find_spacing_violations,
    has_visible_label,
    is_hover_only,
    is_relative_unit,
    meets_target_size,
    probe_desktop_styles,
    probe_mobile,
    summarize_basic_mobile,
    summarize_desktop_styles,
    summarize_mobile,
    MOBILE_PROBE_JS,
)


def _box(width, height, padding="0px", **extra):
    return {
        "width": width,
        "height": height,
        "paddingTop": padding,
        "paddingRight": padding,
        "paddingBottom": padding,
        "paddingLeft": padding,
        **extra,
    }


class TestTargetSize:
    def test_effective_size_adds_padding(self):
        assert effective_size(_box(20, 18, padding="2px")) == (24, 22)

    def test_exact_desktop_minimum_is_compliant(self):
        assert meets_target_size(24, 24, DESKTOP_TARGET_MINIMUM)

    def test_below_desktop_minimum_fails(self):
        assert not meets_target_size(23, 24, DESKTOP_TARGET_MINIMUM)

    def test_44_box_passes_mobile_and_desktop(self):
        width, height = effective_size(_box(40, 40, padding="2px"))
        assert meets_target_size(width, height, MOBILE_TARGET_MINIMUM)
        assert meets_target_size(width, height, DESKTOP_TARGET_MINIMUM)

    def test_24_box_fails_mobile(self):
        assert not meets_target_size(24, 24, MOBILE_TARGET_MINIMUM)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.5em", True),
        ("0.02rem", True),
        ("normal", True),
        ("inherit", True),
        ("24px", False),
        ("1.5", False),
        ("", False),
        (None, False),
    ],
)
def test_relative_units(value, expected):
    assert is_relative_unit(value) is expected


class TestLabelVisibility:
    def test_visible_label_element(self):
        assert has_visible_label({"labels": [{"text": "Email", "visible": True}]})

    def test_hidden_label_element_does_not_count(self):
        assert not has_visible_label({"labels": [{"text": "Email", "visible": False}]})

    def test_aria_label_counts(self):
        assert has_visible_label({"labels": [], "ariaLabel": "Search"})

    def test_blank_aria_label_does_not_count(self):
        assert not has_visible_label({"ariaLabel": "   "})

    def test_visible_labelledby_target(self):
        assert has_visible_label({"labelledBy": [{"text": "Name", "visible": True}]})

    def test_hidden_labelledby_target_does_not_count(self):
        assert not has_visible_label({"labelledBy": [{"text": "Name", "visible": False}]})


def test_hover_only_requires_title_without_aria_alternative():
    assert is_hover_only({"title": "More info"})
    assert not is_hover_only({"title": "More info", "ariaLabel": "More info"})
    assert not is_hover_only({"title": "More info", "ariaDescribedBy": "tip-1"})
    assert not is_hover_only({"title": ""})


def test_spacing_violations_use_origin_distance():
    elements = [
        {"text": "First", "x": 0, "y": 0},
        {"text": "Second", "x": 5, "y": 3},
        {"text": "Far", "x": 100, "y": 0},
    ]

    assert find_spacing_violations(elements) == [{"element1": "First", "element2": "Second", "distance": 3}]


def test_spacing_minimum_is_exclusive():
    assert find_spacing_violations([{"text": "a", "x": 0, "y": 0}, {"text": "b", "x": 8, "y": 0}]) == []


DESKTOP_RAW = {
    "bodyColor": "rgb(34, 34, 34)",
    "linkTotal": 3,
    "links": [
        {"text": "Plain", "href": "/a", "textDecoration": "none", "fontWeight": "400", "color": "rgb(34, 34, 34)"},
        {"text": "Underlined", "href": "/b", "textDecoration": "underline", "fontWeight": "400", "color": "rgb(34, 34, 34)"},
        {"text": "Colored", "href": "/c", "textDecoration": "none", "fontWeight": "400", "color": "rgb(0, 0, 238)"},
    ],
    "formTotal": 1,
    "formElements": [
        {"type": "email", "name": "email", "labels": [{"text": "Email", "visible": True}], "ariaLabel": "", "labelledBy": []},
    ],
    "errorMessages": [
        {"inputType": "email", "message": "Required", "color": "red", "isVisible": True},
    ],
    "spacing": {
        "body": {"lineHeight": "24px", "letterSpacing": "normal", "fontSize": "16px"},
        "paragraphs": [{"lineHeight": "1.5em", "letterSpacing": "1px", "fontSize": "16px"}],
    },
    "targets": [
        {"tag": "a", "text": "tiny", **_box(10, 10)},
        {"tag": "button", "text": "ok", **_box(20, 20, padding="2px")},
    ],
    "interactive": [
        {
            "tag": "button",
            "text": "Info",
            "normal": {"color": "black", "backgroundColor": "white", "boxShadow": "none"},
            "hover": None,
            "active": {"color": "blue"},
            "focus": {"outlineStyle": "solid", "outlineWidth": "2px", "outlineColor": "blue", "color": "black", "backgroundColor": "white", "boxShadow": "none"},
            "disabled": False,
            "title": "Shows details",
            "ariaLabel": "",
            "ariaDescribedBy": "",
        },
        {
            "tag": "a",
            "text": "Quiet",
            "normal": {"color": "black", "backgroundColor": "white", "boxShadow": "none"},
            "focus": {"outlineStyle": "none", "outlineWidth": "0px", "color": "black", "backgroundColor": "white", "boxShadow": "none"},
            "disabled": True,
            "title": "",
        },
    ],
    "animations": [{"element": "div", "className": "spin", "name": "spin", "duration": "1s", "iterationCount": "infinite"}],
    "transitions": [],
    "indicators": [
        {"element": "span", "text": "", "hasIcon": False, "color": "rgb(255, 0, 0)", "backgroundColor": "rgba(0, 0, 0, 0)"},
        {"element": "span", "text": "Error", "hasIcon": False, "color": "rgb(255, 0, 0)", "backgroundColor": "rgba(0, 0, 0, 0)"},
    ],
    "uiComponents": [
        {"element": "button", "text": "Go", "borderWidth": "1px"},
        {"element": "input", "text": "", "borderWidth": "0px"},
    ],
}


class TestDesktopSummary:
    def setup_method(self):
        self.style = summarize_desktop_styles(DESKTOP_RAW)

    def test_link_distinguishability(self):
        details = {link["text"]: link for link in self.style["links"]["details"]}
        assert details["Plain"]["is_distinguishable"] is False
        assert details["Underlined"]["is_distinguishable"] is True
        assert details["Colored"]["is_distinguishable"] is True

    def test_target_sizes(self):
        targets = self.style["target_sizes"]
        assert targets["minimum"] == 24
        assert targets["compliant"] == 1
        assert [t["text"] for t in targets["non_compliant"]] == ["tiny"]

    def test_focus_and_state_facts(self):
        info, quiet = self.style["interactive_states"]["details"]
        assert info["focus"]["has_visible_focus"] is True
        assert info["active"] == {"color": "blue"}
        assert info["disabled"] is None
        assert quiet["focus"]["has_visible_focus"] is False
        assert quiet["focus"]["is_distinct_from_normal"] is False
        assert quiet["disabled"] is not None

    def test_hover_only_detection(self):
        assert self.style["hover_only_info"]["total"] == 1
        assert self.style["hover_only_info"]["details"][0]["tooltip"] == "Shows details"

    def test_spacing_override_flags(self):
        body = self.style["spacing"]["body"]
        assert body["line_height_allows_override"] is False
        assert body["letter_spacing_allows_override"] is True
        assert self.style["spacing"]["paragraphs"][0]["line_height_allows_override"] is True

    def test_color_only_indicators(self):
        silent, labelled = self.style["color_only_indicators"]["details"]
        assert silent["relies_on_color_alone"] is True
        assert labelled["relies_on_color_alone"] is False

    def test_ui_component_borders(self):
        assert [c["has_border"] for c in self.style["ui_components"]["details"]] == [True, False]

    def test_form_labels(self):
        control = self.style["form_elements"]["details"][0]
        assert control["label_visible"] is True
        assert control["label_text"] == "Email"

    def test_animations_use_snake_case(self):
        assert self.style["animations"]["details"][0]["iteration_count"] == "infinite"


def test_empty_probe_result_still_has_every_section():
    style = summarize_desktop_styles({})

    assert style["links"]["total"] == 0
    assert style["target_sizes"]["non_compliant"] == []
    assert set(style) == {
        "links",
        "form_elements",
        "error_messages",
        "spacing",
        "target_sizes",
        "interactive_states",
        "hover_only_info",
        "animations",
        "transitions",
        "color_only_indicators",
        "ui_components",
    }


def test_probe_desktop_styles_evaluates_the_probe():
    page = FakePage(scripts={DESKTOP_STYLE_PROBE_JS: DESKTOP_RAW})

    style = probe_desktop_styles(page)

    assert page.evaluated(DESKTOP_STYLE_PROBE_JS)
    assert style["links"]["total"] == 3


MOBILE_RAW = {
    "viewport": {"width": 390, "height": 844, "metaTag": "width=device-width", "hasViewportMeta": True},
    "touchCandidates": [
        {"tag": "a", "text": "Small", "x": 0, "y": 0, **_box(30, 20)},
        {"tag": "a", "text": "Neighbour", "x": 4, "y": 2, **_box(30, 20)},
        {"tag": "button", "text": "Big", "x": 0, "y": 300, **_box(40, 40, padding="2px")},
    ],
    "mediaQueries": ["(max-width: 600px)", "print", "(min-width: 1024px)"],
    "bodyFontSize": "14px",
    "bodyLineHeight": "20px",
    "bodyLetterSpacing": "normal",
    "textContent": "Hello    mobile\n world",
    "linkTotal": 2,
    "links": [{"text": "Small", "textDecoration": "underline", "fontWeight": "700", "fontSize": "14px"}],
}


class TestMobileSummary:
    def setup_method(self):
        self.mobile = summarize_mobile(MOBILE_RAW, SAMPLE_HTML)

    def test_touch_targets_use_mobile_minimum(self):
        touch = self.mobile["touch_targets"]
        assert touch["minimum"] == 44
        assert touch["compliant"] == 1
        assert touch["non_compliant"][0] == {"element": "Small", "size": "30x20px", "required": "44x44px minimum"}

    def test_spacing_issues(self):
        assert self.mobile["spacing"]["total"] == 1
        assert self.mobile["spacing"]["issues"][0]["distance"] == 2

    def test_responsive_breakpoints_skip_non_width_queries(self):
        assert self.mobile["responsive"] == {
            "has_mobile_media_queries": True,
            "breakpoints": ["(max-width: 600px)", "(min-width: 1024px)"],
        }

    def test_typography(self):
        assert self.mobile["typography"] == {"body_font_size": 14, "body_line_height": 20.0, "meets_minimum": False}

    def test_mirrors_structure_and_styles(self):
        assert self.mobile["degraded"] is False
        assert self.mobile["structured_data"]["forms"] == 1
        assert self.mobile["style_analysis"]["links"]["details"][0]["is_bold"] is True
        assert self.mobile["text_content"] == "Hello mobile world"

    def test_text_is_capped(self):
        mobile = summarize_mobile({**MOBILE_RAW, "textContent": "x" * (MOBILE_TEXT_LIMIT + 10)}, "")
        assert len(mobile["text_content"]) == MOBILE_TEXT_LIMIT


def test_probe_mobile_reads_rendered_html():
    page = FakePage(scripts={MOBILE_PROBE_JS: MOBILE_RAW})

    mobile = probe_mobile(page)

    assert mobile["html"].startswith("<!DOCTYPE html>")
    assert mobile["viewport"]["has_viewport_meta"] is True


def test_basic_mobile_is_marked_degraded():
    mobile = summarize_basic_mobile(
        {
            "viewport": {"width": 390, "height": 844, "metaTag": None, "hasViewportMeta": False},
            "interactiveTotal": 12,
            "bodyFontSize": "16px",
            "textContent": "hello",
            "html": "<html></html>",
        }
    )

    assert mobile["degraded"] is True
    assert mobile["touch_targets"]["total"] == 12
    assert mobile["structured_data"] is None
    assert mobile["style_analysis"] is None
    assert mobile["typography"]["meets_minimum"] is True
