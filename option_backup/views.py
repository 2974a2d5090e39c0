from django.http import Http404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework.response import Response
from rest_framework.views import APIView

from option_backup.apps import get_components
from option_backup.exceptions import BackupNotFound
from option_backup.selectors import parse_selector
from option_backup.serializers import BackupListingSerializer, BackupSnapshotSerializer


class BackupListView(APIView):
    """List snapshot histories of configured options."""

    @extend_schema(
        operation_id="list_backups",
        summary="List option backups",
        description="One row per configured option that currently has a value. Options without a value are omitted.",
        responses={
            200: OpenApiResponse(
                response=BackupListingSerializer(many=True),
                description="Backup summaries in configuration order",
            ),
        },
        tags=["Option Backups"],
    )
    def get(self, request):
        listings = get_components().controller.list_backups()
        return Response(BackupListingSerializer(listings, many=True).data)


class BackupDetailView(APIView):
    """View a single backup. Restoring is only available from the command line."""

    @extend_schema(
        operation_id="view_backup",
        summary="View an option backup",
        parameters=[
            OpenApiParameter(
                name="name",
                type=str,
                location=OpenApiParameter.PATH,
                description="The configured option name",
            ),
            OpenApiParameter(
                name="time_key",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Capture time of the backup, or 'latest' (default)",
                required=False,
            ),
        ],
        responses={
            200: OpenApiResponse(response=BackupSnapshotSerializer, description="The backup"),
            404: OpenApiResponse(description="No backups for the option, or no backup with that time key"),
        },
        tags=["Option Backups"],
    )
    def get(self, request, name: str):
        try:
            selector = parse_selector(request.query_params.get("time_key"))
            snapshot = get_components().controller.view(name, selector)
        except BackupNotFound as exc:
            raise Http404(str(exc)) from exc
        return Response(BackupSnapshotSerializer(snapshot).data)
