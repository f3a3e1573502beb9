from typing import Optional, List, Dict, Any
from psycopg import Connection

INVOICE_SEARCH_CLAUSE = """
    customers.name ILIKE %(pattern)s OR
    customers.email ILIKE %(pattern)s OR
    invoices.amount::text ILIKE %(pattern)s OR
    invoices.date::text ILIKE %(pattern)s OR
    invoices.status ILIKE %(pattern)s
"""

def _pattern(query: Optional[str]) -> str:
    return f"%{query or ''}%"

# Inserts one invoice row. The customer_id is not checked here; a dangling
# reference only fails if the table carries a foreign key.
def insert_invoice(conn: Connection, *, customer_id: str, amount: int, status: str, date: str) -> int:
    with conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO invoices (customer_id, amount, status, date)
            VALUES (%s, %s, %s, %s)
            """,
            (customer_id, amount, status, date),
        )
        return cur.rowcount

# Overwrites customer, amount and status of one invoice. id and date are never touched.
# Returns the number of rows matched (0 when the id does not exist).
def update_invoice(conn: Connection, invoice_id: str, *, customer_id: str, amount: int, status: str) -> int:
    with conn.cursor() as cur:
        cur.execute(
            """
            UPDATE invoices
            SET customer_id = %s, amount = %s, status = %s
            WHERE id = %s
            """,
            (customer_id, amount, status, invoice_id),
        )
        return cur.rowcount

# Removes at most one invoice. Returns the number of rows deleted.
def delete_invoice(conn: Connection, invoice_id: str) -> int:
    with conn.cursor() as cur:
        cur.execute("DELETE FROM invoices WHERE id = %s", (invoice_id,))
        return cur.rowcount


# Lists invoices joined with their customer, filtered by a free-text query.
# LIMIT = page size; OFFSET = start index
def list_invoices(conn: Connection, query: Optional[str] = None, limit: int = 6, offset: int = 0) -> List[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT
              invoices.id,
              invoices.customer_id,
              invoices.amount,
              invoices.date,
              invoices.status,
              customers.name,
              customers.email,
              customers.image_url
            FROM invoices
            JOIN customers ON invoices.customer_id = customers.id
            WHERE {INVOICE_SEARCH_CLAUSE}
            ORDER BY invoices.date DESC
            LIMIT %(limit)s OFFSET %(offset)s
            """,
            {"pattern": _pattern(query), "limit": limit, "offset": offset},
        )
        columns = [col[0] for col in cur.description]
        return [dict(zip(columns, row)) for row in cur.fetchall()]


# Number of pages the listing has for a given query.
def count_invoice_pages(conn: Connection, query: Optional[str] = None, page_size: int = 6) -> int:
    with conn.cursor() as cur:
        cur.execute(
            f"""
            SELECT COUNT(*)
            FROM invoices
            JOIN customers ON invoices.customer_id = customers.id
            WHERE {INVOICE_SEARCH_CLAUSE}
            """,
            {"pattern": _pattern(query)},
        )
        (total,) = cur.fetchone()
    return -(-int(total) // page_size)


# Fetches a single invoice for the edit form. Returns None if not found.
def get_invoice(conn: Connection, invoice_id: str) -> Optional[Dict[str, Any]]:
    with conn.cursor() as cur:
        cur.execute(
            """
            SELECT id, customer_id, amount, status, date
            FROM invoices WHERE id = %s
            """,
            (invoice_id,),
        )
        row = cur.fetchone()
        if not row:
            return None
        columns = [c[0] for c in cur.description]
        return dict(zip(columns, row))
