from django.urls import path

from . import views

app_name = "menu"

urlpatterns = [
    path("restaurants/", views.restaurants, name="restaurants"),
    path("restaurants/<int:restaurant_id>/menu/", views.restaurant_menu, name="restaurant_menu"),
    path("restaurants/<int:restaurant_id>/review/", views.submit_review, name="submit_review"),
]
