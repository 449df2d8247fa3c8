"""Helpers for reading whole result sets out of Protean querysets.

Protean caps a query at 100 rows unless told otherwise, so full scans walk
the queryset page by page.
"""

PAGE_SIZE = 100


def fetch_all(queryset) -> list:
    items = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(PAGE_SIZE).all()
        items.extend(page.items)
        offset += len(page.items)
        if not page.items or offset >= page.total:
            return items
