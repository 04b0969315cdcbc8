"""Reports page and its PDF / CSV exports."""
from django.conf import settings
from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone

from apps.accounts.decorators import staff_required
from apps.core.pdf import PDFRenderError, render_pdf_response
from .reports import build_report, write_csv


def _filename(report, ext):
    return f"autoloc-report-{report['period']}-{timezone.localdate():%Y%m%d}.{ext}"


@staff_required
def report(request):
    data = build_report(request.GET.get('period', ''))
    return render(request, 'dashboard/reports/report.html', {
        'report':  data,
        'periods': [(key, label) for key, (label, _) in settings.REPORT_PERIODS.items()],
        'page': 'reports',
    })


@staff_required
def report_pdf(request):
    data = build_report(request.GET.get('period', ''))
    try:
        return render_pdf_response('dashboard/reports/report_pdf.html', {'report': data}, _filename(data, 'pdf'))
    except PDFRenderError:
        messages.error(request, 'An error occurred while exporting the report.')
        return redirect(f"{reverse('dashboard:report')}?period={data['period']}")


@staff_required
def report_csv(request):
    data = build_report(request.GET.get('period', ''))
    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{_filename(data, "csv")}"'
    write_csv(data, response)
    return response
