from django.http import Http404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from options.models import Option
from options.serializers import OptionSerializer, OptionWriteSerializer
from options.services import delete_option, list_options, read_option, update_option


class OptionView(APIView):
    """Handle single option operations."""

    def _get_entry(self, name: str):
        try:
            return read_option(name)
        except Option.DoesNotExist as exc:
            raise Http404 from exc

    @extend_schema(
        operation_id="read_option",
        summary="Read an option",
        description="Retrieve the decoded value and metadata of an option.",
        parameters=[
            OpenApiParameter(
                name="name",
                type=str,
                location=OpenApiParameter.PATH,
                description="The option name",
            ),
        ],
        responses={
            200: OpenApiResponse(response=OptionSerializer, description="The option"),
            404: OpenApiResponse(description="Option not found"),
        },
        tags=["Options"],
    )
    def get(self, request, name: str):
        entry = self._get_entry(name)
        return Response(OptionSerializer(entry).data)

    @extend_schema(
        operation_id="update_option",
        summary="Create or update an option",
        description="Store a JSON value under the option name. Creates the option if it doesn't exist, otherwise replaces the value and increments the version.",
        parameters=[
            OpenApiParameter(
                name="name",
                type=str,
                location=OpenApiParameter.PATH,
                description="The option name",
            ),
        ],
        request=OptionWriteSerializer,
        responses={
            200: OpenApiResponse(response=OptionSerializer, description="Updated the existing option"),
            201: OpenApiResponse(response=OptionSerializer, description="Created a new option"),
        },
        tags=["Options"],
    )
    def put(self, request, name: str):
        serializer = OptionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        entry, created = update_option(
            name,
            serializer.validated_data["value"],
            autoload=serializer.validated_data.get("autoload"),
        )

        status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(OptionSerializer(entry).data, status=status_code)

    @extend_schema(
        operation_id="delete_option",
        summary="Delete an option",
        parameters=[
            OpenApiParameter(
                name="name",
                type=str,
                location=OpenApiParameter.PATH,
                description="The option name",
            ),
        ],
        responses={
            204: OpenApiResponse(description="Deleted the option"),
            404: OpenApiResponse(description="Option not found"),
        },
        tags=["Options"],
    )
    def delete(self, request, name: str):
        if not delete_option(name):
            raise Http404
        return Response(status=status.HTTP_204_NO_CONTENT)


class OptionListView(APIView):
    """List stored options by name."""

    @extend_schema(
        operation_id="list_options",
        summary="List options",
        parameters=[
            OpenApiParameter(
                name="autoload",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only return options with this autoload flag",
                required=False,
            ),
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Maximum number of results to return (max: 1000)",
                required=False,
            ),
        ],
        responses={
            200: OpenApiResponse(response=OptionSerializer(many=True), description="Options ordered by name"),
        },
        tags=["Options"],
    )
    def get(self, request):
        autoload = request.query_params.get("autoload")
        if autoload is not None:
            autoload = autoload.lower() in ("1", "true", "yes")

        limit = request.query_params.get("limit")
        if limit is not None:
            try:
                limit = int(limit)
            except ValueError:
                return Response(
                    {"detail": "limit must be an integer"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        entries = list_options(autoload=autoload, limit=limit)
        return Response(OptionSerializer(entries, many=True).data)
