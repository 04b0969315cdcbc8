"""Payment views for the back-office: list with totals, record, mark paid, refund."""
import logging
from datetime import timedelta
from decimal import Decimal

from django.contrib import messages
from django.db.models import Q, Sum
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import staff_required
from apps.payments.models import Payment, PaymentMethod, PaymentStatus, PaymentTransitionError
from .forms import PaymentForm
from .views import LIST_PERIODS

logger = logging.getLogger(__name__)


def _total(qs, status) -> Decimal:
    return qs.filter(status=status).aggregate(total=Sum('amount'))['total'] or Decimal('0')


@staff_required
def payment_list(request):
    qs = (
        Payment.objects
        .select_related('reservation', 'reservation__client', 'reservation__vehicle')
        .order_by('-created_at')
    )

    search = request.GET.get('q', '').strip()
    status = request.GET.get('status', '')
    method = request.GET.get('method', '')
    period = request.GET.get('period', '')

    if search:
        qs = qs.filter(
            Q(reservation__reference__icontains=search) |
            Q(reservation__client__first_name__icontains=search) |
            Q(reservation__client__last_name__icontains=search) |
            Q(reservation__client__email__icontains=search)
        )
    if status in PaymentStatus.values:
        qs = qs.filter(status=status)
    if method in PaymentMethod.values:
        qs = qs.filter(method=method)
    if period in LIST_PERIODS:
        qs = qs.filter(created_at__gte=timezone.now() - timedelta(days=LIST_PERIODS[period]))

    totals = {
        'paid':     _total(qs, PaymentStatus.PAID),
        'pending':  _total(qs, PaymentStatus.PENDING),
        'refunded': _total(qs, PaymentStatus.REFUNDED),
    }

    return render(request, 'dashboard/payments/list.html', {
        'payments': qs,
        'totals':   totals,
        'statuses': PaymentStatus.choices,
        'methods':  PaymentMethod.choices,
        'periods':  LIST_PERIODS,
        'filters':  request.GET,
        'page': 'payments',
    })


@staff_required
def payment_create(request):
    initial = {}
    if request.GET.get('reservation'):
        initial['reservation'] = request.GET['reservation']
    form = PaymentForm(request.POST or None, initial=initial)
    if request.method == 'POST' and form.is_valid():
        payment = form.save(commit=False)
        payment.recorded_by = request.user.get_username()
        if payment.status == PaymentStatus.PAID:
            payment.paid_on = timezone.now()
        payment.save()
        logger.info(
            'Payment of %s recorded on %s by %s',
            payment.amount, payment.reservation.reference, payment.recorded_by,
        )
        messages.success(request, f'Payment of {payment.amount} € recorded for {payment.reservation.reference}.')
        return redirect('dashboard:payment_list')
    return render(request, 'dashboard/payments/form.html', {
        'form': form,
        'title': 'Record a payment',
        'page': 'payments',
    })


@require_POST
@staff_required
def payment_mark_paid(request, pk):
    payment = get_object_or_404(Payment, pk=pk)
    try:
        payment.mark_paid()
    except PaymentTransitionError as exc:
        messages.error(request, str(exc))
    else:
        messages.success(request, f'Payment {payment.id_short} marked as paid.')
    return redirect('dashboard:payment_list')


@require_POST
@staff_required
def payment_refund(request, pk):
    payment = get_object_or_404(Payment, pk=pk)
    try:
        payment.refund()
    except PaymentTransitionError as exc:
        messages.error(request, str(exc))
    else:
        logger.info('Payment %s refunded by %s', payment.id_short, request.user.get_username())
        messages.success(request, f'Payment {payment.id_short} refunded.')
    return redirect('dashboard:payment_list')
