from django.urls import path

from . import views

app_name = "coupons"

urlpatterns = [
    path("", views.gift_coupons, name="gift_coupons"),
    path("scratch/", views.scratch, name="scratch"),
]
