from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import OrderApproved, OrderCreated, OrderDeclined
        from modules.orders.handlers import (
            order_approved_handler,
            order_created_handler,
            order_declined_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(OrderApproved, order_approved_handler)
        event_bus.subscribe(OrderDeclined, order_declined_handler)
