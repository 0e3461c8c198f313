"""Offset allocation for parallel offset-based pagination."""

from jirascan.aggregation.models import PageDescriptor


class OffsetAllocator:
    """Hands out page descriptors at strictly increasing offsets.

    Owned by the coordinator's control loop, which is the only caller, so no
    locking is needed. Every offset is issued at most once.

    Example:
        allocator = OffsetAllocator(page_size=25)

        allocator.issue()  # PageDescriptor(offset=0, page_size=25)
        allocator.issue()  # PageDescriptor(offset=25, page_size=25)
        allocator.issue()  # PageDescriptor(offset=50, page_size=25)
    """

    def __init__(self, page_size: int):
        """Initialize offset allocator.

        Args:
            page_size: Number of records per page, fixed for the run

        Raises:
            ValueError: If page_size is not positive
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._page_size = page_size
        self._next_offset = 0
        self._issued: list[int] = []

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def next_offset(self) -> int:
        """Offset the next call to issue() will return."""
        return self._next_offset

    @property
    def issued(self) -> tuple[int, ...]:
        """Every offset issued so far, in issue order."""
        return tuple(self._issued)

    def issue(self) -> PageDescriptor:
        """Claim the next page and advance the cursor.

        Returns:
            Descriptor for the page at the current offset
        """
        descriptor = PageDescriptor(offset=self._next_offset, page_size=self._page_size)
        self._issued.append(descriptor.offset)
        self._next_offset += self._page_size
        return descriptor
