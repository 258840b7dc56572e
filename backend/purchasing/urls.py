from django.urls import path
from .views import (
    purchase_order_list_create, purchase_order_summary, purchase_order_detail,
    purchase_order_pdf, purchase_order_message, purchase_order_send
)

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/summary/', purchase_order_summary, name='purchase-order-summary'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
    path('purchase-orders/<int:pk>/pdf/', purchase_order_pdf, name='purchase-order-pdf'),
    path('purchase-orders/<int:pk>/message/', purchase_order_message, name='purchase-order-message'),
    path('purchase-orders/<int:pk>/send/', purchase_order_send, name='purchase-order-send'),
]
