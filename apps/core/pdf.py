"""
PDF rendering with xhtml2pdf, shared by invoices and report exports.
"""
import logging

from django.http import HttpResponse
from django.template.loader import get_template
from xhtml2pdf import pisa

logger = logging.getLogger(__name__)


class PDFRenderError(Exception):
    pass


def render_pdf_response(template_name: str, context: dict, filename: str) -> HttpResponse:
    """Render a template to an attachment PDF response."""
    html = get_template(template_name).render(context)

    response = HttpResponse(content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    pisa_status = pisa.CreatePDF(html, dest=response)
    if pisa_status.err:
        logger.error('PDF rendering of %s failed with %s error(s)', template_name, pisa_status.err)
        raise PDFRenderError(f'Could not render {filename}.')
    return response
