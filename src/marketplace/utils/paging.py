"""Reading whole collections through Protean querysets."""

PAGE_SIZE = 100


def fetch_all(query, page_size: int = PAGE_SIZE) -> list:
    """Every row matching ``query``, read one page at a time.

    A bare ``.all()`` stops at the entity's default limit, and passing
    ``limit(None)`` falls back to that same default.
    """
    rows = []
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all().items
        rows.extend(page)
        if len(page) < page_size:
            return rows
        offset += page_size
