from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Session
from .serializers import (
    SessionSerializer,
    SessionListSerializer,
    SessionCreateSerializer,
    SessionCountsSerializer,
    CastVoteSerializer,
    CastProxyVoteSerializer,
    RemoveProxyVoteSerializer,
    BulkProxyVoteSerializer,
    ProxyVoteSerializer,
    VoteSerializer,
    StatisticsQuerySerializer,
    StatisticsSerializer,
)

from apps.play_sessions.services import (
    get_or_create_session,
    update_session_counts,
    complete_session,
    deactivate_session,
    cast_vote,
    retract_vote,
    cast_proxy_vote,
    cast_bulk_proxy_votes,
    remove_proxy_vote,
    get_proxy_votes,
    get_statistics,
    # Exceptions
    SessionNotFoundError,
    SessionClosedError,
    VoteNotFoundError,
    ProxyVoteNotFoundError,
)


class SessionPagination(PageNumberPagination):
    """Custom pagination for sessions."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class SessionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for play sessions and their votes.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Sessions newest first (?status= filter)
    create: Open (or fetch) the session for a date
    retrieve: Session with votes and proxy votes
    """

    queryset = Session.objects.all()
    serializer_class = SessionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = SessionPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        queryset = Session.objects.all()
        if self.action == 'retrieve':
            queryset = queryset.prefetch_related(
                'votes__user',
                'proxy_votes__voter',
                'proxy_votes__target',
            )
        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return SessionListSerializer
        elif self.action == 'create':
            return SessionCreateSerializer
        return SessionSerializer

    @extend_schema(request=SessionCreateSerializer, responses={201: SessionSerializer})
    def create(self, request, *args, **kwargs):
        """Open the session for a date (today by default)."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = get_or_create_session(
            play_date=serializer.validated_data.get('play_date')
        )

        output_serializer = SessionSerializer(session, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SessionCountsSerializer, responses={200: SessionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def counts(self, request, pk=None):
        """Update court and shuttlecock counts (admin only)."""
        serializer = SessionCountsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = update_session_counts(session_id=pk, **serializer.validated_data)
        except SessionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SessionSerializer(session, context={'request': request}).data)

    @extend_schema(request=None, responses={200: SessionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def complete(self, request, pk=None):
        """Close the session (admin only)."""
        try:
            session = complete_session(session_id=pk)
        except SessionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SessionSerializer(session, context={'request': request}).data)

    @extend_schema(request=None, responses={200: SessionSerializer})
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated, IsAdminUser])
    def deactivate(self, request, pk=None):
        """Call off the session (admin only)."""
        try:
            session = deactivate_session(session_id=pk)
        except SessionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SessionSerializer(session, context={'request': request}).data)

    @extend_schema(request=CastVoteSerializer, responses={200: VoteSerializer})
    @action(detail=True, methods=['post', 'delete'])
    def vote(self, request, pk=None):
        """Cast (POST) or retract (DELETE) the current user's vote."""
        try:
            if request.method == 'DELETE':
                retract_vote(session_id=pk, user=request.user)
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = CastVoteSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            vote = cast_vote(
                session_id=pk,
                user=request.user,
                vote_type=serializer.validated_data['vote_type']
            )
        except (SessionNotFoundError, VoteNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(VoteSerializer(vote).data)

    @extend_schema(request=CastProxyVoteSerializer, responses={201: ProxyVoteSerializer})
    @action(detail=True, methods=['post', 'delete'])
    def proxy_votes(self, request, pk=None):
        """Vote (POST) or withdraw a vote (DELETE) on behalf of someone."""
        try:
            if request.method == 'DELETE':
                serializer = RemoveProxyVoteSerializer(data=request.data)
                serializer.is_valid(raise_exception=True)
                remove_proxy_vote(
                    session_id=pk,
                    voter=request.user,
                    target_name=serializer.validated_data['target_name']
                )
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = CastProxyVoteSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            proxy_vote = cast_proxy_vote(
                session_id=pk,
                voter=request.user,
                **serializer.validated_data
            )
        except (SessionNotFoundError, ProxyVoteNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProxyVoteSerializer(proxy_vote).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BulkProxyVoteSerializer, responses={201: ProxyVoteSerializer(many=True)})
    @action(detail=True, methods=['post'])
    def bulk_proxy_votes(self, request, pk=None):
        """Add anonymous male/female guests."""
        serializer = BulkProxyVoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            proxy_votes = cast_bulk_proxy_votes(
                session_id=pk,
                voter=request.user,
                **serializer.validated_data
            )
        except SessionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SessionClosedError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        output_serializer = ProxyVoteSerializer(proxy_votes, many=True)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ProxyVoteSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def my_proxy_votes(self, request, pk=None):
        """Proxy votes the current user cast in this session."""
        proxy_votes = get_proxy_votes(session_id=pk, voter=request.user)
        serializer = ProxyVoteSerializer(proxy_votes, many=True)
        return Response(serializer.data)

    @extend_schema(
        parameters=[
            OpenApiParameter('start_date', str, description='YYYY-MM-DD', required=True),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD', required=True),
        ],
        responses={200: StatisticsSerializer},
        tags=['sessions'],
    )
    @action(detail=False, methods=['get'])
    def statistics(self, request):
        """Attendance and cost totals over settled sessions."""
        query = StatisticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        stats = get_statistics(**query.validated_data)
        return Response(StatisticsSerializer(stats).data)
