CONTENT_UNITS = ("unit", "kilogram", "liter")

BOX_UNIT = "box"
PACKET_UNIT = "packet"
DEFAULT_UNIT = "unit"

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_LOCATION = "Unspecified"

NOTES_MAX_LENGTH = 500

PRODUCT_SORT_FIELDS = ("name", "category", "location", "quantity")
INVENTORY_SORT_FIELDS = ("store", "date", "name")
SORT_ORDERS = ("asc", "desc")

ENTRY_ACTIONS = ("add", "replace")
