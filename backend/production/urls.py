from django.urls import path
from .views import recipe_card_list_create, recipe_card_candidates, production_batch_list

urlpatterns = [
    path('recipes/', recipe_card_list_create, name='recipe-card-list-create'),
    path('recipes/candidates/', recipe_card_candidates, name='recipe-card-candidates'),
    path('production-batches/', production_batch_list, name='production-batch-list'),
]
