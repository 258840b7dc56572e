import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from django.db.models import Q, ProtectedError
from django.shortcuts import get_object_or_404
from backend.catalog.filters import filter_active_flag
from backend.core.utils import create_audit_log
from .models import Supplier
from .permissions import CanManageSuppliers
from .serializers import SupplierSerializer, SupplierDetailSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([CanManageSuppliers])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(tax_id__icontains=search) |
                Q(contact_name__icontains=search) |
                Q(phone__icontains=search) |
                Q(email__icontains=search)
            )
        queryset = filter_active_flag(queryset, request.query_params.get('active', None))
        serializer = SupplierSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name,
                changes=serializer.data
            )
            logger.info(f"Supplier {supplier.id} created by {request.user}")
            return Response(SupplierDetailSerializer(supplier).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([CanManageSuppliers])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        serializer = SupplierDetailSerializer(supplier)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierDetailSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Supplier',
                object_id=supplier.id,
                object_name=supplier.name,
                changes={k: str(v) for k, v in serializer.validated_data.items()}
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        supplier_id = supplier.id
        supplier_name = supplier.name
        try:
            supplier.delete()
        except ProtectedError:
            return Response(
                {'error': 'El proveedor tiene ordenes de compra. Desactivalo en su lugar.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        create_audit_log(
            request=request,
            action='delete',
            model_name='Supplier',
            object_id=supplier_id,
            object_name=supplier_name
        )
        return Response(status=status.HTTP_204_NO_CONTENT)
