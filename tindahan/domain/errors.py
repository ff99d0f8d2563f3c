"""Typed failures raised by catalog operations.

The HTTP and CLI layers translate these into status codes and messages.
"""


class CatalogError(Exception):
    """Base class for catalog failures."""


class SpreadsheetFormatError(CatalogError):
    """Raised when a spreadsheet has no recognizable layout or required columns."""


class InvalidRecordError(CatalogError):
    """Raised when an item or category is missing its name or carries an unusable price/stock."""


class DuplicateItemError(CatalogError):
    """Raised when an item name collides (case-insensitively) with an existing item."""

    def __init__(self, item_name: str) -> None:
        super().__init__(f'An item named "{item_name}" already exists')
        self.item_name = item_name


class DuplicateCategoryError(CatalogError):
    """Raised when a category name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Category "{name}" already exists')
        self.name = name


class CategoryInUseError(CatalogError):
    """Raised when deleting a category that inventory items still reference."""

    def __init__(self, name: str, item_count: int) -> None:
        super().__init__(
            f'Category "{name}" is used by {item_count} inventory item(s); '
            "move or delete those items first"
        )
        self.name = name
        self.item_count = item_count


class RecordNotFoundError(CatalogError):
    """Raised when an inventory item or category id does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id
