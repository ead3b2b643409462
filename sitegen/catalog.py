"""Page, component and progress labels in Vietnamese and English."""

from __future__ import annotations

from typing import Dict

from .schemas.generation import Language

PRIMARY_PAGE_IDS = frozenset({"home", "index"})

PAGE_LABELS: Dict[str, Dict[str, str]] = {
    "home": {"vi": "Trang chủ", "en": "Home"},
    "about": {"vi": "Giới thiệu", "en": "About"},
    "services": {"vi": "Dịch vụ", "en": "Services"},
    "products": {"vi": "Sản phẩm", "en": "Products"},
    "blog": {"vi": "Blog", "en": "Blog"},
    "contact": {"vi": "Liên hệ", "en": "Contact"},
    "portfolio": {"vi": "Dự án", "en": "Portfolio"},
    "pricing": {"vi": "Bảng giá", "en": "Pricing"},
    "testimonials": {"vi": "Cảm nhận khách hàng", "en": "Testimonials"},
    "faq": {"vi": "Câu hỏi thường gặp", "en": "FAQ"},
    "team": {"vi": "Đội ngũ", "en": "Team"},
    "booking": {"vi": "Đặt lịch", "en": "Booking"},
    "gallery": {"vi": "Thư viện ảnh", "en": "Gallery"},
    "case-studies": {"vi": "Câu chuyện thành công", "en": "Case Studies"},
    "careers": {"vi": "Tuyển dụng", "en": "Careers"},
    "privacy": {"vi": "Chính sách bảo mật", "en": "Privacy Policy"},
    "resources": {"vi": "Tài nguyên", "en": "Resources"},
    "courses": {"vi": "Khóa học", "en": "Courses"},
    "admin": {"vi": "Quản trị", "en": "Admin"},
}

OPTION_LABELS: Dict[str, Dict[str, str]] = {
    "chatbot": {"vi": "Chatbot AI", "en": "AI chatbot"},
    "newsletter": {"vi": "Đăng ký nhận tin", "en": "Newsletter signup"},
    "partners": {"vi": "Đối tác", "en": "Partner logos"},
    "map": {"vi": "Bản đồ", "en": "Location map"},
    "video-hero": {"vi": "Video nền", "en": "Video hero"},
    "stats": {"vi": "Số liệu nổi bật", "en": "Key statistics"},
    "awards": {"vi": "Giải thưởng", "en": "Awards"},
    "promo-popup": {"vi": "Popup khuyến mãi", "en": "Promo popup"},
    "app-download": {"vi": "Tải ứng dụng", "en": "App download"},
    "live-chat": {"vi": "Chat trực tuyến", "en": "Live chat"},
    "multi-lang": {"vi": "Đa ngôn ngữ", "en": "Language switcher"},
    "rating": {"vi": "Đánh giá sao", "en": "Star ratings"},
}

PROGRESS_MESSAGES: Dict[str, Dict[str, str]] = {
    "analyzing": {"vi": "Đang phân tích yêu cầu...", "en": "Analyzing your request..."},
    "reference_url": {"vi": "Đang phân tích phong cách mẫu: {url}...", "en": "Analyzing reference style: {url}..."},
    "reference_image": {"vi": "Đang phân tích hình ảnh mẫu...", "en": "Analyzing reference image..."},
    "detecting": {"vi": "Đang xác định cấu trúc website...", "en": "Detecting site structure..."},
    "content": {"vi": "Đang tạo nội dung và bố cục...", "en": "Generating content and layout..."},
    "design": {"vi": "Đang hoàn thiện giao diện và tương tác...", "en": "Polishing design and interactions..."},
    "pages": {"vi": "Đang tạo trang: {page}...", "en": "Generating page: {page}..."},
    "seo": {"vi": "Đang tối ưu SEO...", "en": "Optimizing SEO..."},
    "exporting": {"vi": "Đang đóng gói kết quả...", "en": "Packaging the result..."},
    "done": {"vi": "✓ Đã tạo website: {title}", "en": "✓ Website generated successfully: {title}"},
}


def _humanize(identifier: str) -> str:
    return identifier.replace("_", " ").replace("-", " ").strip().title() or identifier


def page_label(page_id: str, language: Language) -> str:
    labels = PAGE_LABELS.get(page_id)
    if labels is None:
        return _humanize(page_id)
    return labels[language.value]


def option_label(option_id: str, language: Language) -> str:
    labels = OPTION_LABELS.get(option_id)
    if labels is None:
        return _humanize(option_id)
    return labels[language.value]


def progress_message(stage: str, language: Language, **values: str) -> str:
    template = PROGRESS_MESSAGES.get(stage, {}).get(language.value, stage)
    return template.format(**values)


def page_filename(page_id: str) -> str:
    slug = "".join(ch if ch.isalnum() or ch == "-" else "-" for ch in page_id.lower()).strip("-")
    return f"{slug or 'page'}.html"


__all__ = [
    "OPTION_LABELS",
    "PAGE_LABELS",
    "PRIMARY_PAGE_IDS",
    "PROGRESS_MESSAGES",
    "option_label",
    "page_filename",
    "page_label",
    "progress_message",
]
