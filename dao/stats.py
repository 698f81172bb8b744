# dao/stats.py
from decimal import Decimal
from sqlalchemy import func
from configs import db
from db.models.order import Order, OrderLine
from db.models.product import Product
from db.models.supplier import Supplier
from db.models.user import User


def total_sales_by_supplier(supplier_id: int) -> Decimal:
    """Sum of line snapshots over the supplier's products, any order status."""
    total = (
        db.session.query(
            func.coalesce(
                func.sum(OrderLine.price_at_purchase * OrderLine.quantity), 0
            )
        )
        .select_from(OrderLine)
        .join(Product, Product.id == OrderLine.product_id)
        .filter(Product.supplier_id == supplier_id)
        .scalar()
    )
    return Decimal(str(total or 0)).quantize(Decimal("0.01"))


def total_orders_by_supplier(supplier_id: int) -> int:
    n = (
        db.session.query(func.count(func.distinct(OrderLine.order_id)))
        .select_from(OrderLine)
        .join(Product, Product.id == OrderLine.product_id)
        .filter(Product.supplier_id == supplier_id)
        .scalar()
    )
    return int(n or 0)


def total_products_by_supplier(supplier_id: int) -> int:
    return Product.query.filter(Product.supplier_id == supplier_id).count()


def supplier_stats(supplier_id: int) -> dict:
    return {
        "totalSales": float(total_sales_by_supplier(supplier_id)),
        "totalOrders": total_orders_by_supplier(supplier_id),
        "totalProducts": total_products_by_supplier(supplier_id),
    }


def admin_totals() -> dict:
    return {
        "totalUsers": User.query.count(),
        "totalOrders": Order.query.count(),
        "totalSuppliers": Supplier.query.count(),
        "totalProducts": Product.query.count(),
    }
