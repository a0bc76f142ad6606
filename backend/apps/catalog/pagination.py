from collections import OrderedDict

from django.conf import settings
from rest_framework.pagination import BasePagination
from rest_framework.response import Response

from .dtos import Page, PageRequest


def _non_negative_int(raw, default):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


class ProductPagination(BasePagination):
    """Zero-based ``?page=&size=&sort=field,dir`` paging with a Spring Data style body.

    Unparseable values fall back to the defaults instead of failing the request.
    """

    page_size = getattr(settings, "PAGE_SIZE", 12)
    max_page_size = getattr(settings, "MAX_PAGE_SIZE", 100)
    page_query_param = "page"
    page_size_query_param = "size"
    sort_query_param = "sort"

    def get_page_request(self, request) -> PageRequest:
        params = request.query_params
        page = _non_negative_int(params.get(self.page_query_param), 0)
        size = _non_negative_int(params.get(self.page_size_query_param), self.page_size)
        if size == 0:
            size = self.page_size
        size = min(size, self.max_page_size)
        sort_field, descending = None, False
        raw_sort = params.get(self.sort_query_param)
        if raw_sort:
            field, _, direction = raw_sort.partition(",")
            sort_field = field.strip() or None
            descending = direction.strip().lower() == "desc"
        return PageRequest(page=page, size=size, sort_field=sort_field, descending=descending)

    @staticmethod
    def _sort_payload(page_request: PageRequest):
        is_sorted = page_request.sort_field is not None
        return OrderedDict(
            [("empty", not is_sorted), ("sorted", is_sorted), ("unsorted", not is_sorted)]
        )

    def get_page_response(self, page: Page, data) -> Response:
        req = page.request
        sort = self._sort_payload(req)
        return Response(
            OrderedDict(
                [
                    ("content", data),
                    (
                        "pageable",
                        OrderedDict(
                            [
                                ("pageNumber", req.page),
                                ("pageSize", req.size),
                                ("sort", sort),
                                ("offset", req.offset),
                                ("paged", True),
                                ("unpaged", False),
                            ]
                        ),
                    ),
                    ("last", page.is_last),
                    ("totalElements", page.total_elements),
                    ("totalPages", page.total_pages),
                    ("size", req.size),
                    ("number", req.page),
                    ("sort", sort),
                    ("first", page.is_first),
                    ("numberOfElements", len(data)),
                    ("empty", len(data) == 0),
                ]
            )
        )

