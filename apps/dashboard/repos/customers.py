from typing import List, Dict, Any, Optional
from psycopg import Connection

# All customers, for the customer <select> on the invoice forms.
def list_customers(conn: Connection) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT id, name, email, image_url
            FROM customers
            ORDER BY name ASC
            """
        )
        columns = [c[0] for c in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]

# Customers matching a name/email query, with their invoice totals in cents.
def list_customer_summaries(conn: Connection, query: Optional[str] = None) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT
              customers.id,
              customers.name,
              customers.email,
              customers.image_url,
              COUNT(invoices.id) AS total_invoices,
              COALESCE(SUM(CASE WHEN invoices.status = 'pending' THEN invoices.amount ELSE 0 END), 0) AS total_pending,
              COALESCE(SUM(CASE WHEN invoices.status = 'paid' THEN invoices.amount ELSE 0 END), 0) AS total_paid
            FROM customers
            LEFT JOIN invoices ON customers.id = invoices.customer_id
            WHERE customers.name ILIKE %(pattern)s OR customers.email ILIKE %(pattern)s
            GROUP BY customers.id, customers.name, customers.email, customers.image_url
            ORDER BY customers.name ASC
            """,
            {"pattern": f"%{query or ''}%"},
        )
        columns = [c[0] for c in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]
