"""Plain-text receipt layout.

Money is handled as integer cents everywhere in the shop; it is only
turned into a ``$D.CC`` string here, at the edge.
"""

from typing import List, Optional, Sequence

ACTIVE_RECEIPT = "This transaction is still active. Please check out to receive a receipt."

_WIDTH = 48


def format_cents(cents: int) -> str:
    """Render an integer amount of cents as ``$D.CC``."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars}.{remainder:02d}"


def create_active_receipt() -> str:
    return ACTIVE_RECEIPT


def _row(columns: Sequence[str], widths: Sequence[int]) -> str:
    cells = [col.ljust(w) if i == 0 else col.rjust(w) for i, (col, w) in enumerate(zip(columns, widths))]
    return "| " + " ".join(cells) + " |"


def create_receipt(
    headings: Sequence[str],
    entries: Sequence[Sequence[str]],
    total: str,
    customer_name: str,
    saved: Optional[str] = None,
) -> str:
    """Lay out a finished transaction.

    Each entry holds one value per heading.  Any values beyond the
    headings are annotations and are printed on their own line beneath
    the entry (used for discount notes).

    Args:
        headings: Column titles, e.g. ``["Item", "Qty", "Price (ea.)", "Subtotal"]``.
        entries: Rows of already-formatted strings.
        total: Formatted grand total.
        customer_name: Name printed in the closing line.
        saved: Formatted amount saved; the savings line is omitted when None.
    """
    n = len(headings)
    widths = [len(h) for h in headings]
    for entry in entries:
        for i, value in enumerate(entry[:n]):
            widths[i] = max(widths[i], len(value))
    inner = max(_WIDTH, sum(widths) + (n - 1) + 4)
    widths[0] += inner - (sum(widths) + (n - 1) + 4)

    border = "=" * inner
    rule = "-" * inner
    lines: List[str] = [border, _row(headings, widths), rule]
    for entry in entries:
        lines.append(_row(entry[:n], widths))
        for note in entry[n:]:
            lines.append("|   " + note.ljust(inner - 6) + " |")
    lines.append(rule)
    lines.append(_row(["Total:", total], [inner - 5 - len(total), len(total)]))
    if saved is not None:
        lines.append(_row(["***** TOTAL SAVINGS:", saved + " *****"], [inner - 11 - len(saved), len(saved) + 6]))
    lines.append(border)
    lines.append(f"Thank you for shopping with us, {customer_name}!")
    return "\n".join(lines)
