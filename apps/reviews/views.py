from django.db.models import Avg, Count
from django.shortcuts import render
from .models import Review


def review_list(request):
    """Published reviews with average and 1-5 star distribution; ?rating= filters."""
    published = Review.objects.filter(is_published=True)

    stats = published.aggregate(avg=Avg('rating'), total=Count('id'))
    counts = dict(published.order_by().values_list('rating').annotate(n=Count('id')))
    total = stats['total'] or 0
    distribution = [
        {
            'rating': star,
            'count': counts.get(star, 0),
            'percent': round(counts.get(star, 0) * 100 / total) if total else 0,
        }
        for star in range(5, 0, -1)
    ]

    reviews = published.select_related('client', 'vehicle')
    rating = request.GET.get('rating', '')
    if rating.isdigit() and 1 <= int(rating) <= 5:
        reviews = reviews.filter(rating=int(rating))

    return render(request, 'reviews/review_list.html', {
        'reviews': reviews,
        'average': round(stats['avg'], 1) if stats['avg'] is not None else 0,
        'total': total,
        'distribution': distribution,
        'rating_filter': rating,
    })
