from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

class SubscriberPagination(PageNumberPagination):
    """
    Pagination for ledger listings, in the project's standard response format.
    """
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 500

    def get_paginated_response(self, data):
        return Response({
            'message': 'Subscribers retrieved successfully',
            'data': {
                'subscribers': data,
                'pagination': {
                    'current_page': self.page.number,
                    'total_pages': self.page.paginator.num_pages,
                    'total_items': self.page.paginator.count,
                    'has_next': self.page.has_next(),
                    'has_previous': self.page.has_previous(),
                    'page_size': self.get_page_size(self.request)
                }
            }
        })
