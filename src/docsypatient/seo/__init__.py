"""
Build-time SEO page generation for the marketing site.
"""

from .html_pages import DEFAULT_PAGES, SeoPage, generate_pages, render_page

__all__ = ["DEFAULT_PAGES", "SeoPage", "generate_pages", "render_page"]
