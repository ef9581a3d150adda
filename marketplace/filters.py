import django_filters
from django.db.models import Q

from marketplace.catalog.domain.models.catalog import Product


class ProductFilter(django_filters.FilterSet):
    """
    Filter for catalog listings.

    Location filtering (lat/lng/radius) and sorting are not declared here;
    CatalogService applies them after these filters.
    """

    # Price range filters
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")

    # Seller filters
    seller = django_filters.UUIDFilter(field_name="seller_id")
    seller_type = django_filters.ChoiceFilter(choices=Product.SELLER_TYPE_CHOICES)

    # Search in multiple fields
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Product
        fields = ["category", "seller", "seller_type"]

    def filter_in_stock(self, queryset, name, value):
        """Only ``true`` narrows the listing; false or absent means no stock filter"""
        if value:
            return queryset.filter(stock__gt=0)
        return queryset

    def filter_search(self, queryset, name, value):
        """Match any whitespace-separated term against name, description or tags"""
        terms = value.split() if value else []
        if not terms:
            return queryset

        query = Q()
        for term in terms:
            query |= Q(name__icontains=term) | Q(description__icontains=term) | Q(tags__icontains=term)
        return queryset.filter(query)
