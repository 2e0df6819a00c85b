# app/services/cart_lines.py
"""
Pure line-item algorithms used by CartService.

Nothing here touches the database or raises HTTP errors. Every function
returns a new list and leaves its inputs untouched, so the service can
compute the next state first and persist it in one write.
"""
from dataclasses import replace

from app.models.cart import LineItem, LineKey


def index_of(lines: list[LineItem], key: LineKey) -> int | None:
    """Position of the line with `key`, or None."""
    for idx, line in enumerate(lines):
        if line.key == key:
            return idx
    return None


def upsert_line(lines: list[LineItem], new_line: LineItem) -> list[LineItem]:
    """
    Add `new_line` to the cart lines.

    If a line with the same (product, size, color) key exists its
    quantity is increased and its snapshot fields are kept; otherwise
    the new line is appended.
    """
    idx = index_of(lines, new_line.key)
    if idx is None:
        return [*lines, new_line]

    result = list(lines)
    existing = result[idx]
    result[idx] = replace(existing, quantity=existing.quantity + new_line.quantity)
    return result


def set_quantity(lines: list[LineItem], key: LineKey, quantity: int) -> list[LineItem]:
    """
    Absolute quantity update. A quantity <= 0 removes the line.

    Raises:
        KeyError: if no line has `key`.
    """
    idx = index_of(lines, key)
    if idx is None:
        raise KeyError(key)

    if quantity <= 0:
        return lines[:idx] + lines[idx + 1:]

    result = list(lines)
    result[idx] = replace(result[idx], quantity=quantity)
    return result


def remove_line(lines: list[LineItem], key: LineKey) -> list[LineItem]:
    """
    Raises:
        KeyError: if no line has `key`.
    """
    idx = index_of(lines, key)
    if idx is None:
        raise KeyError(key)
    return lines[:idx] + lines[idx + 1:]


def merge_lines(target: list[LineItem], incoming: list[LineItem]) -> list[LineItem]:
    """
    Key-based multiset union of two carts' lines.

    - lines sharing a key collapse into one, quantities summed
    - the target's order is kept, unseen incoming keys are appended
      in incoming order
    - the target's snapshot (name, image, price) wins on a shared key

    Duplicate keys inside either input are collapsed as well, so the
    result never holds two lines with the same key.
    """
    merged: dict[LineKey, LineItem] = {}
    for line in [*target, *incoming]:
        current = merged.get(line.key)
        if current is None:
            merged[line.key] = replace(line)
        else:
            merged[line.key] = replace(current, quantity=current.quantity + line.quantity)
    return list(merged.values())
