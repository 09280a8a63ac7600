import django_filters

from modules.deliveries.models import Delivery, DeliveryStatus


class DeliveryFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=DeliveryStatus.choices)
    customer = django_filters.UUIDFilter(field_name="customer_id")
    order = django_filters.UUIDFilter(field_name="order_id")

    class Meta:
        model = Delivery
        fields = ["status", "customer", "order"]
