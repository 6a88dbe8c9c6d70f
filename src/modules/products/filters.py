import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Storefront listing filters.

    Out-of-stock products are hidden unless ``include_out_of_stock=true``.
    """

    include_out_of_stock = django_filters.BooleanFilter(
        method="filter_include_out_of_stock"
    )
    title = django_filters.CharFilter(field_name="title", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price_czk", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price_czk", lookup_expr="lte")

    class Meta:
        model = Product
        fields = ["include_out_of_stock", "title", "min_price", "max_price"]

    def filter_include_out_of_stock(self, queryset, name, value):
        # Applied in ``filter_queryset`` so the default holds without the param.
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        if not self.form.cleaned_data.get("include_out_of_stock"):
            queryset = queryset.filter(quantity__gt=0)
        return queryset
