"""Content summary from rendered or static HTML.

Pure functions over markup: title, meta description, headings, links with a
CTA flag, images, forms, buttons and whitespace-collapsed body text. Used for
the desktop render, the mobile render and the static fallback alike.
"""

import re

from bs4 import BeautifulSoup

from models import Headings, MobileStructure, StructuredData

HTML_CHAR_LIMIT = 200_000
TEXT_CONTENT_LIMIT = 50_000
MOBILE_HTML_CHAR_LIMIT = 100_000
MOBILE_TEXT_LIMIT = 30_000

MAX_LINKS = 50
MAX_MOBILE_LINKS = 30
MAX_IMAGES = 30

CTA_KEYWORDS = ("click", "buy", "sign up", "contact")
BUTTON_SELECTOR = 'button, input[type="submit"], input[type="button"]'

_WHITESPACE = re.compile(r"\s+")


def truncate(text: str | None, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters. Never raises."""
    if not text or limit <= 0:
        return ""
    return text[:limit]


def collapse_whitespace(text: str | None) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def is_cta_text(text: str) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in CTA_KEYWORDS)


def _headings(soup: BeautifulSoup) -> Headings:
    return {
        "h1": [h.get_text(" ", strip=True) for h in soup.find_all("h1")],
        "h2": [h.get_text(" ", strip=True) for h in soup.find_all("h2")],
        "h3": [h.get_text(" ", strip=True) for h in soup.find_all("h3")],
    }


def _buttons(soup: BeautifulSoup) -> list[dict]:
    buttons = []
    for el in soup.select(BUTTON_SELECTOR):
        buttons.append(
            {
                "text": el.get_text(" ", strip=True) or str(el.get("value") or ""),
                "type": str(el.get("type") or "button"),
            }
        )
    return buttons


def _body_text(soup: BeautifulSoup, limit: int) -> str:
    for tag in soup.find_all(["script", "style", "noscript", "template"]):
        tag.decompose()
    body = soup.body or soup
    return truncate(collapse_whitespace(body.get_text(" ")), limit)


def extract_structured_data(
    html: str,
    title: str | None = None,
    text_limit: int = TEXT_CONTENT_LIMIT,
) -> StructuredData:
    """
    Summarize ``html``. ``title`` overrides the <title> text when the
    browser already reported one.
    """
    soup = BeautifulSoup(html or "", "html.parser")

    page_title = (title or "").strip()
    if not page_title and soup.title and soup.title.string:
        page_title = soup.title.string.strip()

    meta_description = ""
    meta_desc_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    if meta_desc_tag and meta_desc_tag.get("content"):
        meta_description = (meta_desc_tag["content"] or "").strip()

    links = []
    for a in soup.find_all("a")[:MAX_LINKS]:
        text = a.get_text(" ", strip=True)
        links.append({"text": text, "href": a.get("href"), "is_cta": is_cta_text(text)})

    images = [
        {
            "src": img.get("src"),
            "alt": str(img.get("alt") or ""),
            "title": str(img.get("title") or ""),
        }
        for img in soup.find_all("img")[:MAX_IMAGES]
    ]

    headings = _headings(soup)
    forms = len(soup.find_all("form"))
    buttons = _buttons(soup)

    # Text last: it strips script/style out of the tree.
    text_content = _body_text(soup, text_limit)

    return {
        "title": page_title or "No title",
        "meta_description": meta_description,
        "headings": headings,
        "links": links,
        "images": images,
        "forms": forms,
        "buttons": buttons,
        "text_content": text_content,
    }


def extract_mobile_structure(html: str) -> MobileStructure:
    """Headings, buttons, links and form count of the mobile-rendered DOM."""
    soup = BeautifulSoup(html or "", "html.parser")
    return {
        "headings": _headings(soup),
        "buttons": _buttons(soup),
        "links": [
            {"text": a.get_text(" ", strip=True), "href": a.get("href")}
            for a in soup.find_all("a")[:MAX_MOBILE_LINKS]
        ],
        "forms": len(soup.find_all("form")),
    }
