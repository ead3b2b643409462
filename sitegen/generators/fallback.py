"""Deterministic stand-ins used when the provider cannot produce a file.

Every template depends only on the prompt, the language and the list of
extra pages, so the same request always degrades to the same artifact.
"""

from __future__ import annotations

import html as html_lib
import re
from typing import Dict, List, Sequence, Tuple

from ..catalog import page_filename, page_label
from ..schemas.generation import Language

FALLBACK_KEYWORDS = "website, landing page"
MAX_FALLBACK_KEYWORDS = 8

_WORD_RE = re.compile(r"[^\W\d_]{4,}", re.UNICODE)

_TEXT: Dict[str, Dict[str, str]] = {
    "vi": {
        "home": "Trang chủ",
        "about": "Giới thiệu",
        "contact": "Liên hệ",
        "welcome": "Chào mừng đến với website của chúng tôi. Khám phá các dịch vụ tuyệt vời mà chúng tôi mang lại.",
        "cta": "Bắt đầu ngay",
        "credit": "Tạo bởi sitegen",
        "page_intro": "Nội dung trang đang được cập nhật. Vui lòng quay lại sau.",
        "back": "Quay về trang chủ",
        "dashboard": "Bảng điều khiển",
        "visitors": "Lượt truy cập",
        "orders": "Đơn hàng",
        "messages": "Tin nhắn",
        "recent": "Hoạt động gần đây",
        "empty": "Chưa có dữ liệu.",
        "menu": "Mở menu",
    },
    "en": {
        "home": "Home",
        "about": "About",
        "contact": "Contact",
        "welcome": "Welcome to our website. Discover the amazing services we provide.",
        "cta": "Get Started",
        "credit": "Created by sitegen",
        "page_intro": "This page is being updated. Please check back soon.",
        "back": "Back to home",
        "dashboard": "Dashboard",
        "visitors": "Visitors",
        "orders": "Orders",
        "messages": "Messages",
        "recent": "Recent activity",
        "empty": "No data yet.",
        "menu": "Open menu",
    },
}


def _text(language: Language) -> Dict[str, str]:
    return _TEXT[language.value]


def _escape(value: str, limit: int) -> str:
    return html_lib.escape(value.strip()[:limit])


def _head(title: str, language: Language) -> str:
    return (
        "<!DOCTYPE html>\n"
        f"<html lang=\"{language.value}\">\n"
        "<head>\n"
        "  <meta charset=\"UTF-8\">\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">\n"
        f"  <title>{title}</title>\n"
        "  <link rel=\"stylesheet\" href=\"styles.css\">\n"
        "  <script src=\"https://cdn.tailwindcss.com\"></script>\n"
        "</head>\n"
    )


def _nav_links(language: Language, pages: Sequence[str]) -> List[Tuple[str, str]]:
    text = _text(language)
    links = [("index.html", text["home"])]
    if not pages:
        links.append(("index.html#about", text["about"]))
        links.append(("index.html#contact", text["contact"]))
        return links
    for page_id in pages:
        links.append((page_filename(page_id), html_lib.escape(page_label(page_id, language))))
    return links


def _nav(brand: str, language: Language, pages: Sequence[str] = ()) -> str:
    text = _text(language)
    items = "".join(
        f"        <a href=\"{href}\" class=\"hover:text-blue-400 transition\">{label}</a>\n"
        for href, label in _nav_links(language, pages)
    )
    return (
        "  <header class=\"py-6 px-8 border-b border-white/10\">\n"
        "    <nav class=\"max-w-6xl mx-auto flex justify-between items-center\">\n"
        f"      <a href=\"index.html\" class=\"text-2xl font-bold\">{brand}</a>\n"
        f"      <button class=\"menu-toggle md:hidden\" aria-label=\"{text['menu']}\">&#9776;</button>\n"
        "      <div class=\"nav-links flex gap-6\">\n"
        + items
        + "      </div>\n"
        "    </nav>\n"
        "  </header>\n"
    )


def _footer(brand: str, language: Language) -> str:
    return (
        "  <footer class=\"border-t border-white/10 py-8 text-center text-slate-400\">\n"
        f"    <p>&copy; {brand}. {_text(language)['credit']}</p>\n"
        "  </footer>\n"
        "  <script src=\"script.js\"></script>\n"
        "</body>\n"
        "</html>\n"
    )


def fallback_index_html(prompt: str, language: Language, pages: Sequence[str] = ()) -> str:
    text = _text(language)
    brand = _escape(prompt, 30)
    headline = _escape(prompt, 60)
    return (
        _head(_escape(prompt, 50), language)
        + "<body class=\"min-h-screen bg-gradient-to-br from-slate-900 via-blue-900 to-slate-900 text-white\">\n"
        + _nav(brand, language, pages)
        + "  <main class=\"max-w-6xl mx-auto px-8 py-20\">\n"
        "    <section class=\"text-center mb-20\">\n"
        "      <h1 class=\"text-5xl font-extrabold mb-6 bg-gradient-to-r from-blue-400 to-purple-400 "
        "bg-clip-text text-transparent\">\n"
        f"        {headline}\n"
        "      </h1>\n"
        "      <p class=\"text-xl text-slate-300 max-w-2xl mx-auto mb-8\">\n"
        f"        {text['welcome']}\n"
        "      </p>\n"
        "      <a href=\"#contact\" class=\"btn-primary px-8 py-4 bg-blue-600 hover:bg-blue-700 rounded-xl "
        f"font-bold text-lg transition\">{text['cta']}</a>\n"
        "    </section>\n"
        f"    <section id=\"about\" class=\"glass rounded-2xl p-8 mb-12\"><h2 class=\"text-3xl font-bold\">"
        f"{text['about']}</h2></section>\n"
        f"    <section id=\"contact\" class=\"glass rounded-2xl p-8\"><h2 class=\"text-3xl font-bold\">"
        f"{text['contact']}</h2></section>\n"
        "  </main>\n"
        + _footer(brand, language)
    )


def fallback_css() -> str:
    return (
        "/* Custom styles */\n"
        "* {\n"
        "  margin: 0;\n"
        "  padding: 0;\n"
        "  box-sizing: border-box;\n"
        "}\n"
        "\n"
        "body {\n"
        "  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;\n"
        "}\n"
        "\n"
        ".glass {\n"
        "  background: rgba(255, 255, 255, 0.05);\n"
        "  backdrop-filter: blur(10px);\n"
        "  border: 1px solid rgba(255, 255, 255, 0.1);\n"
        "}\n"
        "\n"
        "@media (max-width: 768px) {\n"
        "  .nav-links {\n"
        "    display: none;\n"
        "  }\n"
        "  .nav-links.open {\n"
        "    display: flex;\n"
        "    flex-direction: column;\n"
        "  }\n"
        "}\n"
    )


def fallback_js(language: Language) -> str:
    return (
        "document.addEventListener('DOMContentLoaded', function () {\n"
        f"  document.documentElement.lang = '{language.value}';\n"
        "  var toggle = document.querySelector('.menu-toggle');\n"
        "  var links = document.querySelector('.nav-links');\n"
        "  if (toggle && links) {\n"
        "    toggle.addEventListener('click', function () {\n"
        "      links.classList.toggle('open');\n"
        "    });\n"
        "  }\n"
        "  document.querySelectorAll('a[href^=\"#\"]').forEach(function (anchor) {\n"
        "    anchor.addEventListener('click', function (event) {\n"
        "      var target = document.querySelector(anchor.getAttribute('href'));\n"
        "      if (target) {\n"
        "        event.preventDefault();\n"
        "        target.scrollIntoView({ behavior: 'smooth' });\n"
        "      }\n"
        "    });\n"
        "  });\n"
        "});\n"
    )


def fallback_page_html(prompt: str, language: Language, page_id: str, pages: Sequence[str] = ()) -> str:
    text = _text(language)
    brand = _escape(prompt, 30)
    label = html_lib.escape(page_label(page_id, language))
    return (
        _head(f"{label} | {brand}", language)
        + "<body class=\"min-h-screen bg-slate-900 text-white\">\n"
        + _nav(brand, language, pages)
        + "  <main class=\"max-w-4xl mx-auto px-8 py-20\">\n"
        f"    <h1 class=\"text-4xl font-extrabold mb-6\">{label}</h1>\n"
        f"    <p class=\"text-lg text-slate-300 mb-8\">{text['page_intro']}</p>\n"
        f"    <a href=\"index.html\" class=\"text-blue-400 hover:underline\">{text['back']}</a>\n"
        "  </main>\n"
        + _footer(brand, language)
    )


def fallback_admin_html(prompt: str, language: Language) -> str:
    text = _text(language)
    brand = _escape(prompt, 30)
    cards = "".join(
        f"      <div class=\"glass rounded-xl p-6\"><p class=\"text-slate-400\">{text[key]}</p>"
        "<p class=\"text-3xl font-bold\">0</p></div>\n"
        for key in ("visitors", "orders", "messages")
    )
    return (
        _head(f"{text['dashboard']} | {brand}", language)
        + "<body class=\"min-h-screen bg-slate-950 text-white\">\n"
        + "  <main class=\"max-w-6xl mx-auto px-8 py-12\">\n"
        f"    <h1 class=\"text-3xl font-bold mb-8\">{text['dashboard']} &middot; {brand}</h1>\n"
        "    <section class=\"grid grid-cols-1 md:grid-cols-3 gap-6 mb-10\">\n"
        + cards
        + "    </section>\n"
        f"    <section class=\"glass rounded-xl p-6\"><h2 class=\"text-xl font-semibold mb-4\">{text['recent']}</h2>"
        f"<p class=\"text-slate-400\">{text['empty']}</p></section>\n"
        "  </main>\n"
        + _footer(brand, language)
    )


def fallback_keywords(prompt: str) -> str:
    words: List[str] = []
    for match in _WORD_RE.finditer(prompt.lower()):
        word = match.group(0)
        if word not in words:
            words.append(word)
        if len(words) >= MAX_FALLBACK_KEYWORDS:
            break
    if not words:
        return FALLBACK_KEYWORDS
    return ", ".join(words)


def fallback_seo(prompt: str) -> Dict[str, str]:
    text = prompt.strip()
    return {
        "title": text[:60],
        "description": text[:160],
        "keywords": fallback_keywords(text),
    }


__all__ = [
    "FALLBACK_KEYWORDS",
    "fallback_admin_html",
    "fallback_css",
    "fallback_index_html",
    "fallback_js",
    "fallback_keywords",
    "fallback_page_html",
    "fallback_seo",
]
