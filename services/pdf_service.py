import logging
from pathlib import Path
from typing import Dict, Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class PDFService:
    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """Renders a template to HTML"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML -> PDF"""
        # imported lazily: weasyprint needs pango/cairo at import time
        import weasyprint

        base_url = settings.WEASYPRINT_FONT_DIR or str(TEMPLATE_DIR)
        return weasyprint.HTML(string=html_content, base_url=base_url).write_pdf()

    def render_academic_report(self, report: Dict[str, Any]) -> str:
        return self._render_template("academic_report.html", report)

    def generate_academic_report_pdf(self, report: Dict[str, Any]) -> bytes:
        """Academic report PDF"""
        html = self.render_academic_report(report)
        logger.info("rendering academic report pdf for %s", report.get("student"))
        return self._html_to_pdf(html)
