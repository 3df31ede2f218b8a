from __future__ import annotations

from typing import NewType

CompanyId = NewType("CompanyId", str)
UserId = NewType("UserId", str)
OrderId = NewType("OrderId", str)
TableId = NewType("TableId", str)
ProductId = NewType("ProductId", str)
CustomerId = NewType("CustomerId", str)
