from dom_extractor import (
    HTML_CHAR_LIMIT,
    MAX_LINKS,
    TEXT_CONTENT_LIMIT,
    extract_mobile_structure,
    extract_structured_data,
    is_cta_text,
    truncate,
)


def test_extracts_page_identity_and_headings(sample_html):
    data = extract_structured_data(sample_html)

    assert data["title"] == "Acme Widgets"
    assert data["meta_description"] == "Widgets for every team"
    assert data["headings"] == {
        "h1": ["Build better widgets"],
        "h2": ["Why Acme", "Customers"],
        "h3": ["Fast"],
    }


def test_links_carry_cta_flag(sample_html):
    links = extract_structured_data(sample_html)["links"]
    by_text = {link["text"]: link for link in links}

    assert by_text["Sign up today"]["is_cta"] is True
    assert by_text["Contact sales"]["is_cta"] is True
    assert by_text["Pricing"]["is_cta"] is False
    assert by_text["Pricing"]["href"] == "/pricing"


def test_images_forms_and_buttons(sample_html):
    data = extract_structured_data(sample_html)

    assert data["images"] == [
        {"src": "/logo.png", "alt": "Acme logo", "title": ""},
        {"src": "/hero.jpg", "alt": "", "title": ""},
    ]
    assert data["forms"] == 1
    assert {"text": "Subscribe", "type": "submit"} in data["buttons"]
    assert {"text": "Open menu", "type": "button"} in data["buttons"]


def test_text_content_drops_scripts_and_collapses_whitespace(sample_html):
    text = extract_structured_data(sample_html)["text_content"]

    assert "window.tracking" not in text
    assert "color: #222" not in text
    assert "Enable JavaScript" not in text
    assert "Acme widgets ship in days, not weeks." in text


def test_browser_title_overrides_markup_title(sample_html):
    assert extract_structured_data(sample_html, title="Rendered Title")["title"] == "Rendered Title"


def test_missing_title_falls_back():
    assert extract_structured_data("<html><body><p>hi</p></body></html>")["title"] == "No title"


def test_text_content_is_capped():
    html = "<html><body><p>" + "word " * 20_000 + "</p></body></html>"

    assert len(extract_structured_data(html)["text_content"]) == TEXT_CONTENT_LIMIT
    assert len(extract_structured_data(html, text_limit=100)["text_content"]) == 100


def test_links_are_capped():
    html = "<html><body>" + "".join(f'<a href="/{i}">link {i}</a>' for i in range(80)) + "</body></html>"

    assert len(extract_structured_data(html)["links"]) == MAX_LINKS


def test_truncate_never_raises():
    assert truncate(None, 10) == ""
    assert truncate("abc", 0) == ""
    assert truncate("abcdef", 3) == "abc"
    assert len(truncate("x" * (HTML_CHAR_LIMIT + 5), HTML_CHAR_LIMIT)) == HTML_CHAR_LIMIT


def test_empty_markup_is_tolerated():
    data = extract_structured_data("")

    assert data["title"] == "No title"
    assert data["links"] == []
    assert data["text_content"] == ""


def test_cta_keywords_are_case_insensitive():
    assert is_cta_text("BUY NOW")
    assert not is_cta_text("About us")


def test_mobile_structure(sample_html):
    structure = extract_mobile_structure(sample_html)

    assert structure["headings"]["h1"] == ["Build better widgets"]
    assert structure["forms"] == 1
    assert len(structure["links"]) == 4
    assert "is_cta" not in structure["links"][0]
