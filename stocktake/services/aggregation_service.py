from stocktake.core.constants import (
    BOX_UNIT,
    DEFAULT_CATEGORY,
    INVENTORY_SORT_FIELDS,
    PRODUCT_SORT_FIELDS,
    SORT_ORDERS,
)
from stocktake.core.errors import ValidationError
from stocktake.core.units import display_unit


def _text_key(value):
    return (value or "").casefold()


def _validate_order(order):
    order = (order or "asc").strip().lower()
    if order not in SORT_ORDERS:
        raise ValidationError("order must be 'asc' or 'desc'")
    return order


def product_total(product) -> float:
    quantity = product.current_quantity or 0
    if product.unit == BOX_UNIT:
        return quantity * (product.quantity_per_box or 0)
    return quantity


def category_totals(products):
    """Group products by category and sum their quantities in display units.

    Groups come back ordered by category name, so the totals do not depend on
    the input order. Within a group, ``products`` keeps the input order and the
    display unit is the last product's.
    """
    groups = {}
    for product in products:
        category = product.category or DEFAULT_CATEGORY
        group = groups.get(category)
        if group is None:
            group = {"category": category, "total_quantity": 0.0, "unit": None, "products": []}
            groups[category] = group
        group["total_quantity"] += product_total(product)
        group["unit"] = display_unit(product)
        group["products"].append(product)
    return [groups[key] for key in sorted(groups, key=lambda key: (key.casefold(), key))]


def store_totals(products):
    totals = {}
    for product in products:
        for entry in product.quantity_history:
            store = totals.get(entry.store_name)
            if store is None:
                store = {"store_name": entry.store_name, "total_quantity": 0.0, "product_ids": set()}
                totals[entry.store_name] = store
            store["total_quantity"] += entry.quantity or 0
            store["product_ids"].add(product.id)
    results = []
    for store_name in sorted(totals, key=lambda name: (_text_key(name), name or "")):
        store = totals[store_name]
        results.append(
            {
                "store_name": store_name,
                "total_quantity": store["total_quantity"],
                "product_count": len(store["product_ids"]),
            }
        )
    return results


def store_names(inventories):
    names = []
    seen = set()
    for inventory in inventories:
        name = inventory.store_name
        if not name or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


def filter_products(products, query=None):
    query_text = (query or "").strip().casefold()
    if not query_text:
        return list(products)
    return [
        product
        for product in products
        if query_text in _text_key(product.name)
        or query_text in _text_key(product.category)
        or query_text in _text_key(product.location)
    ]


def sort_products(products, field="name", order="asc"):
    if field not in PRODUCT_SORT_FIELDS:
        raise ValidationError(
            "sort must be one of: {}".format(", ".join(PRODUCT_SORT_FIELDS))
        )
    order = _validate_order(order)
    if field == "quantity":
        def key(product):
            return product.current_quantity or 0
    else:
        def key(product):
            return _text_key(getattr(product, field))
    return sorted(products, key=key, reverse=order == "desc")


def filter_inventories(inventories, query=None, store=None):
    query_text = (query or "").strip().casefold()
    results = []
    for inventory in inventories:
        if store and inventory.store_name != store:
            continue
        if query_text and not (
            query_text in _text_key(inventory.name)
            or query_text in _text_key(inventory.store_name)
        ):
            continue
        results.append(inventory)
    return results


def sort_inventories(inventories, field="date", order="desc"):
    if field not in INVENTORY_SORT_FIELDS:
        raise ValidationError(
            "sort must be one of: {}".format(", ".join(INVENTORY_SORT_FIELDS))
        )
    order = _validate_order(order)
    if field == "store":
        def key(inventory):
            return _text_key(inventory.store_name)
    elif field == "date":
        def key(inventory):
            return inventory.date
    else:
        def key(inventory):
            return _text_key(inventory.name)
    return sorted(inventories, key=key, reverse=order == "desc")


def group_inventories_by_store(inventories):
    groups = {}
    for inventory in inventories:
        groups.setdefault(inventory.store_name, []).append(inventory)
    return [
        {"store_name": store_name, "inventories": members}
        for store_name, members in groups.items()
    ]
