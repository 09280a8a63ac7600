from rest_framework.routers import SimpleRouter

from modules.deliveries.views import DeliveryViewSet

router = SimpleRouter(trailing_slash=True)
router.register("deliveries", DeliveryViewSet, basename="delivery")

urlpatterns = router.urls
