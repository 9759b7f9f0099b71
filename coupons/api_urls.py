from django.urls import path

from . import api_views

urlpatterns = [
    path("coupons/preview/", api_views.CouponPreviewView.as_view(), name="coupon-preview"),
    path("gift-coupons/", api_views.GiftCouponListView.as_view(), name="gift-coupon-list"),
]
