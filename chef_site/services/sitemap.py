"""
sitemap.xml generation: the site's static pages plus every published blog post.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from xml.etree import ElementTree as ET
import logging

from chef_site.errors import AppError
from chef_site.services.blog import BlogService

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"


@dataclass(frozen=True)
class StaticPage:
    path: str
    changefreq: str
    priority: str
    image: Optional[Tuple[str, str, str]] = None  # (path, title, caption)


STATIC_PAGES: List[StaticPage] = [
    StaticPage("/", "weekly", "1.0", (
        "/assets/img/chef-stefan-hero.jpg",
        "Chef Stefan Bekker - Award-Winning Private Chef Cape Town",
        "International award-winning private chef serving Cape Town, Stellenbosch, and Western Cape",
    )),
    StaticPage("/menu.html", "weekly", "0.95"),
    StaticPage("/cart.html", "monthly", "0.7"),
    StaticPage("/blog.html", "weekly", "0.85"),
    StaticPage("/gallery.html", "weekly", "0.8"),
    StaticPage("/chef-info.html", "monthly", "0.9", (
        "/assets/img/chef-stefan-profile.jpg",
        "Chef Stefan Bekker Professional Portrait",
        "Executive chef with 19 years experience in luxury hospitality across Cape Town and Western Cape",
    )),
    StaticPage("/#services", "weekly", "0.85"),
    StaticPage("/#book-a-table", "weekly", "0.8"),
    StaticPage("/#contact", "monthly", "0.75"),
    StaticPage("/#about", "monthly", "0.7"),
]

ET.register_namespace("", SITEMAP_NS)
ET.register_namespace("image", IMAGE_NS)


def _add_url(urlset: ET.Element, loc: str, lastmod: str, changefreq: str, priority: str) -> ET.Element:
    url = ET.SubElement(urlset, f"{{{SITEMAP_NS}}}url")
    ET.SubElement(url, f"{{{SITEMAP_NS}}}loc").text = loc
    ET.SubElement(url, f"{{{SITEMAP_NS}}}lastmod").text = lastmod
    ET.SubElement(url, f"{{{SITEMAP_NS}}}changefreq").text = changefreq
    ET.SubElement(url, f"{{{SITEMAP_NS}}}priority").text = priority
    return url


def build_sitemap(
    site_url: str,
    posts: Iterable[Tuple[str, Optional[datetime]]],
    today: Optional[date] = None,
) -> bytes:
    """
    Render the sitemap document.

    Args:
        site_url: Public origin, e.g. "https://chefstefan.co.za"
        posts: (slug, updated_at) for each published post
        today: lastmod for the static pages (defaults to today)

    Returns:
        bytes: UTF-8 XML with declaration
    """
    base = site_url.rstrip("/")
    current = (today or date.today()).isoformat()

    urlset = ET.Element(f"{{{SITEMAP_NS}}}urlset")
    for page in STATIC_PAGES:
        url = _add_url(urlset, f"{base}{page.path}", current, page.changefreq, page.priority)
        if page.image:
            image_path, title, caption = page.image
            image = ET.SubElement(url, f"{{{IMAGE_NS}}}image")
            ET.SubElement(image, f"{{{IMAGE_NS}}}loc").text = f"{base}{image_path}"
            ET.SubElement(image, f"{{{IMAGE_NS}}}title").text = title
            ET.SubElement(image, f"{{{IMAGE_NS}}}caption").text = caption

    for slug, updated_at in posts:
        lastmod = updated_at.date().isoformat() if updated_at else current
        _add_url(urlset, f"{base}/blog-post.html?slug={slug}", lastmod, "monthly", "0.6")

    return ET.tostring(urlset, encoding="utf-8", xml_declaration=True)


class SitemapService:
    def __init__(self, blog: BlogService, site_url: str):
        self.blog = blog
        self.site_url = site_url

    async def render(self) -> bytes:
        """Build the sitemap. If the posts cannot be read, only static pages are listed."""
        try:
            posts = await self.blog.published_for_sitemap()
        except AppError as e:
            logger.warning(f"Sitemap generated without blog posts: {e.message}")
            posts = []
        return build_sitemap(self.site_url, posts)
