# testimony_core/common/api/pagination.py
from __future__ import annotations

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "page_size"
    max_page_size = 100


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None, extra=None, context=None) -> Response:
    """
    Shared pagination helper to enforce a stable contract:
      { count, next, previous, results }

    `extra` is merged into the paginated body (e.g. per-status counts for dashboards).
    """
    p = paginator or DefaultPagination()
    context = context or {"request": request}
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True, context=context)
        response = p.get_paginated_response(ser.data)
        if extra:
            response.data.update(extra)
        return response

    # If pagination is disabled for some reason, fall back to a non-paginated list.
    ser = serializer_class(queryset, many=True, context=context)
    return Response(ser.data)
