from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from psycopg import Connection

from ..db import get_conn
from ..models.customer import CustomerSummary
from ..repos.customers import list_customer_summaries

router = APIRouter(prefix="/dashboard/customers", tags=["customers"])

# Customers with invoice totals, filtered by name/email
@router.get("", response_model=List[CustomerSummary])
def list_customers(query: Optional[str] = Query(None), conn: Connection = Depends(get_conn)):
    return list_customer_summaries(conn, query=query)
