import logging
from django.conf import settings
from django.core.paginator import Paginator
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from backend.core.utils import create_audit_log
from .documents import build_purchase_order_document
from .lines import lines_from_form
from .messages import build_purchase_order_message
from .models import PurchaseOrder
from .pdf import render
from .serializers import PurchaseOrderSerializer, PurchaseOrderSummarySerializer

logger = logging.getLogger(__name__)


def _split_items(request):
    """Header data and submitted lines (JSON 'items' or flattened item_<n>_* form fields)"""
    data = request.data.copy()
    items_data = data.pop('items', None)
    if items_data is None:
        items_data = lines_from_form(request.data, settings.PURCHASE_ORDER_MAX_LINES)
    return data, items_data


def _positive_int(value, default):
    """Positive integer query parameter, ``default`` when missing or invalid"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _order_queryset():
    return PurchaseOrder.objects.select_related('supplier', 'site').prefetch_related('items', 'items__product')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or create a new draft order"""
    if request.method == 'GET':
        queryset = _order_queryset()

        supplier = request.query_params.get('supplier', None)
        site = request.query_params.get('site', None)
        status_filter = request.query_params.get('status', None)

        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        if site:
            queryset = queryset.filter(site_id=site)
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        queryset = queryset.order_by('-created_at', '-id')

        page = _positive_int(request.query_params.get('page'), 1)
        limit = _positive_int(request.query_params.get('limit'), 15)

        paginator = Paginator(queryset, limit)
        page_obj = paginator.get_page(page)

        serializer = PurchaseOrderSerializer(page_obj, many=True)
        return Response({
            'results': serializer.data,
            'count': paginator.count,
            'next': page_obj.next_page_number() if page_obj.has_next() else None,
            'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
            'page': page_obj.number,
            'page_size': limit,
            'total_pages': paginator.num_pages,
        })
    else:  # POST
        data, items_data = _split_items(request)

        serializer = PurchaseOrderSerializer(data=data, context={'items_data': items_data, 'request': request})
        if serializer.is_valid():
            order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='PurchaseOrder',
                object_id=order.id,
                object_name=order.supplier.name,
                object_reference=order.order_number,
                changes={'lines': order.items.count(), 'total': str(order.get_total())}
            )
            return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_summary(request):
    """Valid line count and estimated total for a set of lines, without saving"""
    _, items_data = _split_items(request)
    serializer = PurchaseOrderSummarySerializer(data={'items': items_data or []})
    if serializer.is_valid():
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, update or delete a purchase order"""
    order = get_object_or_404(_order_queryset(), pk=pk)

    if request.method == 'GET':
        serializer = PurchaseOrderSerializer(order)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        data, items_data = _split_items(request)

        serializer = PurchaseOrderSerializer(
            order,
            data=data,
            partial=request.method == 'PATCH',
            context={'items_data': items_data, 'request': request}
        )
        if serializer.is_valid():
            order = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='PurchaseOrder',
                object_id=order.id,
                object_name=order.supplier.name,
                object_reference=order.order_number,
                changes={'lines_replaced': items_data is not None}
            )
            return Response(PurchaseOrderSerializer(_order_queryset().get(pk=order.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        order_number = order.order_number
        order_id = order.id
        order.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='PurchaseOrder',
            object_id=order_id,
            object_reference=order_number
        )
        logger.info(f"Purchase order {order_number} deleted by {request.user}")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_pdf(request, pk):
    """Download the purchase order as a one-page PDF"""
    order = get_object_or_404(_order_queryset(), pk=pk)
    title, lines = build_purchase_order_document(order)
    content = render(title, lines)

    create_audit_log(
        request=request,
        action='po_pdf',
        model_name='PurchaseOrder',
        object_id=order.id,
        object_reference=order.order_number
    )

    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{order}.pdf"'
    response['Content-Length'] = str(len(content))
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_message(request, pk):
    """Text to send the supplier along with the PDF link"""
    order = get_object_or_404(_order_queryset(), pk=pk)
    pdf_url = request.build_absolute_uri(reverse('purchase-order-pdf', args=[order.pk]))
    has_items = order.items.exists()

    message = build_purchase_order_message(
        order_id=str(order),
        supplier_name=order.supplier.name,
        site_name=order.site.name,
        pdf_url=pdf_url,
        expected_at=order.expected_at,
        total_amount=order.get_total() if has_items else None,
        currency=order.currency,
    )
    return Response({'message': message, 'pdf_url': pdf_url})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_send(request, pk):
    """Mark a draft order as sent to the supplier"""
    order = get_object_or_404(PurchaseOrder, pk=pk)

    if order.status != 'draft':
        return Response(
            {'error': f'Solo se pueden enviar ordenes en borrador (estado actual: {order.status}).'},
            status=status.HTTP_400_BAD_REQUEST
        )
    if not order.items.exists():
        return Response(
            {'error': 'La orden no tiene lineas validas.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    order.status = 'sent'
    order.sent_at = timezone.now()
    order.save(update_fields=['status', 'sent_at', 'updated_at'])

    create_audit_log(
        request=request,
        action='po_send',
        model_name='PurchaseOrder',
        object_id=order.id,
        object_reference=order.order_number,
        changes={'status': {'from': 'draft', 'to': 'sent'}}
    )
    logger.info(f"Purchase order {order.order_number} sent by {request.user}")
    return Response(PurchaseOrderSerializer(_order_queryset().get(pk=order.pk)).data)
