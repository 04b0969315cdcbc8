from django.db.models import Avg, Count, Q
from django.shortcuts import render

from apps.agencies.models import Agency
from apps.reviews.models import Review
from apps.vehicles.filters import with_rating
from apps.vehicles.models import Vehicle, VehicleCategory


def home(request):
    """Landing page: featured vehicles, categories, latest reviews and agencies."""
    available = Vehicle.objects.filter(is_available=True)
    featured = with_rating(available.select_related('agency')).order_by('-rating_avg', 'daily_rate')[:6]
    category_counts = dict(available.order_by().values_list('category').annotate(n=Count('id')))
    return render(request, 'index.html', {
        'featured': featured,
        'categories': [
            (value, label, category_counts.get(value, 0)) for value, label in VehicleCategory.choices
        ],
        'reviews': Review.objects.filter(is_published=True).select_related('client', 'vehicle')[:3],
        'agencies': Agency.objects.order_by('name'),
        'average_rating': Review.objects.filter(is_published=True).aggregate(avg=Avg('rating'))['avg'],
    })


def agencies(request):
    """Agency addresses, phones and opening hours."""
    agencies = Agency.objects.annotate(
        vehicle_count=Count('vehicles', filter=Q(vehicles__archived_at__isnull=True, vehicles__is_available=True)),
    ).order_by('name')
    return render(request, 'agencies.html', {'agencies': agencies})


# ── Error handlers ────────────────────────────────────────────────────────────

def error_404(request, exception=None):
    return render(request, 'errors/404.html', status=404)


def error_500(request):
    return render(request, 'errors/500.html', status=500)


def error_403(request, exception=None):
    return render(request, 'errors/403.html', status=403)
