import logging
from datetime import timedelta
from decimal import Decimal
from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from backend.catalog.models import Product
from backend.catalog.serializers import ProductSerializer
from backend.core.utils import create_audit_log
from .models import RecipeCard, RecipeIngredient, RecipeStep, ProductionBatch, ProductionBatchConsumption
from .serializers import (
    RECIPE_PRODUCT_TYPES, RecipeCardSerializer, RecipeCardCreateSerializer, ProductionBatchSerializer
)

logger = logging.getLogger(__name__)

RECIPE_LIST_LIMIT = 100
RECIPE_CANDIDATE_LIMIT = 400
BATCH_LIST_LIMIT = 80
BATCH_SUMMARY_DAYS = 7


def _filter_site(queryset, site_id):
    """Restrict to one site when site_id is given; unknown ids match nothing"""
    site_id = (site_id or '').strip()
    if not site_id:
        return queryset
    if not site_id.isdigit():
        return queryset.none()
    return queryset.filter(site_id=site_id)


def _count_and_sum(rows, key):
    """{key: {'lines': n, 'qty': total}} from values().annotate() rows"""
    return {
        row[key]: {'lines': row['lines'], 'qty': row['qty'] or Decimal('0')}
        for row in rows
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def recipe_card_list_create(request):
    """List recipe cards with BOM/step counts, or create a draft card"""
    if request.method == 'GET':
        queryset = RecipeCard.objects.select_related('product').order_by('-updated_at')
        queryset = _filter_site(queryset, request.query_params.get('site_id'))
        cards = list(queryset[:RECIPE_LIST_LIMIT])

        product_ids = {card.product_id for card in cards}
        card_ids = [card.id for card in cards]

        ingredient_rows = (
            RecipeIngredient.objects
            .filter(product_id__in=product_ids, is_active=True)
            .values('product_id')
            .annotate(lines=Count('id'), qty=Sum('quantity'))
        ) if product_ids else []
        step_rows = (
            RecipeStep.objects
            .filter(recipe_card_id__in=card_ids)
            .values('recipe_card_id')
            .annotate(total=Count('id'))
        ) if card_ids else []

        context = {
            'ingredients': _count_and_sum(ingredient_rows, 'product_id'),
            'steps': {row['recipe_card_id']: row['total'] for row in step_rows},
        }
        serializer = RecipeCardSerializer(cards, many=True, context=context)
        return Response({
            'results': serializer.data,
            'summary': {
                'total': len(cards),
                'published': sum(1 for card in cards if card.status == 'published'),
                'draft': sum(1 for card in cards if card.status == 'draft'),
            },
        })
    else:
        serializer = RecipeCardCreateSerializer(data=request.data)
        if serializer.is_valid():
            card = serializer.save()
            create_audit_log(
                request=request,
                action='recipe_create',
                model_name='RecipeCard',
                object_id=card.id,
                object_name=card.product.name,
                changes={'yield_qty': str(card.yield_qty), 'yield_unit': card.yield_unit}
            )
            logger.info(f"Recipe card {card.id} created for product {card.product_id}")
            return Response(RecipeCardSerializer(card).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def recipe_card_candidates(request):
    """Active preparation/sale products that can get a new recipe card"""
    requested = (request.query_params.get('product_id') or '').strip()

    queryset = Product.objects.filter(is_active=True, product_type__in=RECIPE_PRODUCT_TYPES).order_by('name')
    taken = set(RecipeCard.objects.values_list('product_id', flat=True))
    products = [
        product for product in queryset[:RECIPE_CANDIDATE_LIMIT]
        if product.id not in taken or str(product.id) == requested
    ]
    return Response(ProductSerializer(products, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def production_batch_list(request):
    """Latest production batches with consumption totals and a 7-day summary"""
    queryset = ProductionBatch.objects.select_related('product', 'site').order_by('-created_at')
    queryset = _filter_site(queryset, request.query_params.get('site_id'))
    batches = list(queryset[:BATCH_LIST_LIMIT])

    batch_ids = [batch.id for batch in batches]
    consumption_rows = (
        ProductionBatchConsumption.objects
        .filter(batch_id__in=batch_ids)
        .values('batch_id')
        .annotate(lines=Count('id'), qty=Sum('consumed_qty'))
    ) if batch_ids else []

    context = {'consumptions': _count_and_sum(consumption_rows, 'batch_id')}
    serializer = ProductionBatchSerializer(batches, many=True, context=context)

    since = timezone.now() - timedelta(days=BATCH_SUMMARY_DAYS)
    recent = [batch for batch in batches if batch.created_at >= since]
    return Response({
        'results': serializer.data,
        'summary': {
            'days': BATCH_SUMMARY_DAYS,
            'batches': len(recent),
            'produced_qty': float(sum((batch.produced_qty or Decimal('0') for batch in recent), Decimal('0'))),
            'total_cost': float(sum((batch.total_cost or Decimal('0') for batch in recent), Decimal('0'))),
        },
    })
