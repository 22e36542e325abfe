"""
Up Bank CSV Samples

Builders for synthetic Up export documents used by import and CLI tests.
"""

UP_CSV_HEADER = (
    "Time,BSB/Account Number,Account Name,Transaction Type,Payee,Description,Category,Tags,"
    "Subtotal (AUD),Currency,Subtotal (Transaction Currency),Round Up (AUD),Total (AUD),"
    "Payment Method,Settled Date"
)


def up_csv_row(
    time: str = "2026-01-15 09:30:00 +11:00",
    transaction_type: str = "Purchase",
    payee: str = "Woolworths",
    description: str = "Woolworths Metro",
    category: str = "Groceries",
    tags: str = "",
    total: str = "-45.99",
    payment_method: str = "card",
) -> str:
    """One Up export line with sensible defaults."""
    return (
        f"{time},633-123 123456789,Spending,{transaction_type},{payee},{description},{category},{tags},"
        f"{total},AUD,{total},0.00,{total},{payment_method},{time[:10]}"
    )


def up_csv(*rows: str) -> str:
    """Complete Up export document from row lines."""
    return "\n".join([UP_CSV_HEADER, *rows]) + "\n"
