"""
Per-route SEO copies of the built web app's index.html.

Each feature page gets its own ``<dist>/<route>/index.html`` with a
route-specific title, description and keywords, substituted into the base
template at build time.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

_TITLE_RE = re.compile(r"<title>[\s\S]*?</title>", re.IGNORECASE)
_DESCRIPTION_RE = re.compile(r"""<meta\s+name=["']description["'][^>]*>""", re.IGNORECASE)
_KEYWORDS_RE = re.compile(r"""<meta\s+name=["']keywords["'][^>]*>""", re.IGNORECASE)


@dataclass(frozen=True)
class SeoPage:
    route: str
    title: str
    description: str
    keywords: List[str] = field(default_factory=list)


DEFAULT_PAGES = [
    SeoPage(
        route="/features/patient-management-system-for-clinics",
        title="Patient Management System for Clinics | Docsy ERP",
        description=(
            "Advanced patient health analytics software with clinic patient management "
            "and OPD management software for smart reporting, billing and workflow automation."
        ),
        keywords=[
            "Patient Health Analytics Software",
            "Patient Management System for Clinics",
            "Clinic patient management software",
            "OPD management software",
        ],
    ),
    SeoPage(
        route="/features/pharmacy-management-software-tricity",
        title="Pharmacy Management Software in tricity | Docsy ERP",
        description=(
            "Docsy ERP delivers medical store inventory software, pharmacy billing software "
            "and cloud pharmacy software for clinic billing, stock control and reports."
        ),
        keywords=[
            "Pharmacy Management Software in tricity",
            "Medical store inventory software",
            "Pharmacy billing software",
            "Cloud pharmacy software for clinic",
        ],
    ),
    SeoPage(
        route="/features/smart-prescription-software-for-doctors",
        title="Smart Prescription Software for Doctors | Docsy ERP",
        description=(
            "Docsy ERP clinic e-prescription system and digital prescription software for "
            "doctors in India with EMR integration for secure, paperless workflows."
        ),
        keywords=[
            "Smart Prescription Software for Doctors",
            "Clinic e-prescription system",
            "Digital prescription software",
            "Digital prescription software for doctors",
        ],
    ),
]


def escape_html(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


def upsert_title(html: str, title: str) -> str:
    tag = f"<title>{escape_html(title)}</title>"
    return _TITLE_RE.sub(lambda _m: tag, html, count=1)


def upsert_description(html: str, description: str) -> str:
    """Replace the description tag; templates without one are left alone."""
    tag = f'<meta name="description" content="{escape_html(description)}" />'
    return _DESCRIPTION_RE.sub(lambda _m: tag, html, count=1)


def upsert_keywords(html: str, keywords: Iterable[str]) -> str:
    """Replace the keywords tag, or add it right after the description tag."""
    tag = f'<meta name="keywords" content="{escape_html(", ".join(keywords))}" />'
    if _KEYWORDS_RE.search(html):
        return _KEYWORDS_RE.sub(lambda _m: tag, html, count=1)
    return _DESCRIPTION_RE.sub(lambda m: f"{m.group(0)}\n    {tag}", html, count=1)


def render_page(base_html: str, page: SeoPage) -> str:
    html = upsert_title(base_html, page.title)
    html = upsert_description(html, page.description)
    return upsert_keywords(html, page.keywords)


def generate_pages(dist_root: Path, pages: Iterable[SeoPage] = DEFAULT_PAGES) -> List[Path]:
    """Write one index.html per page under ``dist_root``; returns the written paths."""
    dist_root = Path(dist_root)
    base_html = (dist_root / "index.html").read_text(encoding="utf-8")

    written = []
    for page in pages:
        target_dir = dist_root / page.route.lstrip("/")
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / "index.html"
        target.write_text(render_page(base_html, page), encoding="utf-8")
        written.append(target)
        logger.info(f"Wrote SEO page {target}")
    return written
