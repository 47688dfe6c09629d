"""
Pagination classes for the API.
"""

from rest_framework.pagination import PageNumberPagination


class PageNumberWithSizePagination(PageNumberPagination):
    """
    Page number pagination whose page size the client may choose.

    Query Parameters:
        - page: Page number (default: 1)
        - page_size: Number of items per page (default: 25, max: 100)

    Example:
        GET /api/production/kpis/?page=2&page_size=50
    """

    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 100
