from typing import Any, Dict

from psycopg import Connection


def get_card_data(conn: Connection) -> Dict[str, Any]:
    """
    Headline numbers for the dashboard overview.

    Returns
    -------
    Dict[str, Any]
        ``number_of_invoices``, ``number_of_customers``, and
        ``total_paid`` / ``total_pending`` in cents.
    """
    with conn.cursor() as cur:
        cur.execute("SELECT COUNT(*) FROM invoices")
        (number_of_invoices,) = cur.fetchone()

        cur.execute("SELECT COUNT(*) FROM customers")
        (number_of_customers,) = cur.fetchone()

        cur.execute(
            """
            SELECT
              COALESCE(SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END), 0) AS paid,
              COALESCE(SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END), 0) AS pending
            FROM invoices
            """
        )
        paid, pending = cur.fetchone()

    return {
        "number_of_invoices": int(number_of_invoices),
        "number_of_customers": int(number_of_customers),
        "total_paid": int(paid),
        "total_pending": int(pending),
    }
