from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Payment
from .serializers import (
    PaymentFilterSerializer,
    PaymentSerializer,
    PaymentSummaryQuerySerializer,
    PaymentSummarySerializer,
    SessionPaymentSummarySerializer,
    SettleResponseSerializer,
)

from apps.payments.services import (
    settle_session,
    format_report,
    mark_payment_paid,
    get_user_payment_summary,
    get_session_payment_summary,
    # Exceptions
    SessionNotFoundError,
    SessionClosedError,
    NoParticipantsError,
    PaymentNotFoundError,
    PaymentAlreadyPaidError,
)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for ledger rows (read-only, plus payment marking).

    list: Payments, filtered by ?session= and ?paid=
    retrieve: A specific payment
    """

    queryset = Payment.objects.select_related('session', 'user')
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = PaymentPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        """Filter payments using input serializer validation."""
        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = Payment.objects.select_related('session', 'user')
        if params.get('session'):
            queryset = queryset.filter(session_id=params['session'])
        if params.get('paid') is not None:
            queryset = queryset.filter(paid=params['paid'])
        return queryset

    @extend_schema(request=None, responses={200: PaymentSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def mark_paid(self, request, pk=None):
        """Mark a payment as received (admin only)."""
        try:
            payment = mark_payment_paid(payment_id=pk)
        except PaymentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (PaymentAlreadyPaidError, SessionClosedError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSerializer(payment).data)

    @extend_schema(
        parameters=[OpenApiParameter('since', str, description='YYYY-MM-DD')],
        responses={200: PaymentSummarySerializer},
    )
    @action(detail=False, methods=['get'])
    def my_summary(self, request):
        """Current user's totals over recent sessions."""
        query = PaymentSummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        summary = get_user_payment_summary(
            user=request.user,
            since=query.validated_data.get('since')
        )
        return Response(PaymentSummarySerializer(summary).data)


@extend_schema(
    request=None,
    responses={200: SettleResponseSerializer},
    description="Settle a session: recompute shares, replace its payments and return the report.",
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def settle(request, session_id):
    """Settle a session (admin only)."""
    try:
        result = settle_session(session_id)
    except SessionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except NoParticipantsError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'result': result.as_dict(),
        'report': format_report(result),
    })


@extend_schema(
    responses={200: SessionPaymentSummarySerializer},
    description="Paid and unpaid totals of a session's ledger, with who still owes.",
    tags=['payments'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def session_summary(request, session_id):
    """Collection progress of one session (admin only)."""
    try:
        summary = get_session_payment_summary(session_id=session_id)
    except SessionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(SessionPaymentSummarySerializer(summary).data)
