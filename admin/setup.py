# admin/setup.py
from flask import make_response, redirect, url_for
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from flask_admin.theme import Bootstrap4Theme
from flask_login import current_user

from configs import db
from db.models.user import UserRole
from utils.auth import authorize, current_identity, token_from_request
from utils.http import clear_session_cookie


# Back office is admin only; API error handlers render the 401/403


def _admin_only() -> bool:
    return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)


class MarketplaceAdminIndex(AdminIndexView):
    @expose("/logout")
    def admin_logout(self):
        from dao import session as session_dao

        session_dao.destroy_session(token_from_request())
        return clear_session_cookie(make_response(redirect(url_for("admin.index"))))

    def is_accessible(self):
        return _admin_only()

    def inaccessible_callback(self, name, **kwargs):
        # raises Unauthorized or Forbidden
        authorize(current_identity(), UserRole.ADMIN)


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return _admin_only()

    def inaccessible_callback(self, name, **kwargs):
        authorize(current_identity(), UserRole.ADMIN)


class UserView(SecureModelView):
    column_exclude_list = ["password"]
    column_details_exclude_list = ["password"]
    column_export_exclude_list = ["password"]
    form_excluded_columns = ["password", "sessions", "client", "supplier"]
    column_searchable_list = ["username", "email"]
    column_filters = ["role", "created_at"]
    can_create = False


class ProductView(SecureModelView):
    column_searchable_list = ["name", "description"]
    column_filters = ["price", "stock", "supplier_id", "category_id"]
    column_list = ["id", "name", "supplier", "category", "price", "stock", "created_at"]


class OrderView(SecureModelView):
    column_filters = ["status", "created_at", "client_id"]
    column_list = ["id", "client", "status", "total", "created_at"]
    # lines are a historical record
    form_excluded_columns = ["lines", "total", "client"]


class QuoteView(SecureModelView):
    column_filters = ["kind", "status", "created_at"]
    column_list = ["id", "kind", "client", "supplier", "status", "total", "valid_until"]
    form_excluded_columns = ["lines", "total"]


def init_admin(app):
    admin = Admin(
        app,
        name="Materiaux Admin",
        theme=Bootstrap4Theme(),
        index_view=MarketplaceAdminIndex(url="/manage"),
        url="/manage",
    )
    # imported here to avoid circular imports
    from db.models import (
        Category,
        Client,
        Delivery,
        Favorite,
        Order,
        OrderLine,
        Product,
        Quote,
        QuoteLine,
        Supplier,
        User,
    )

    admin.add_view(UserView(User, db, category="Accounts", endpoint="admin_user", name="Users"))
    admin.add_view(SecureModelView(Client, db, category="Accounts", endpoint="admin_client", name="Clients"))
    admin.add_view(SecureModelView(Supplier, db, category="Accounts", endpoint="admin_supplier", name="Suppliers"))

    admin.add_view(ProductView(Product, db, category="Catalog", endpoint="admin_product", name="Products"))
    admin.add_view(SecureModelView(Category, db, category="Catalog", endpoint="admin_category", name="Categories"))
    admin.add_view(SecureModelView(Favorite, db, category="Catalog", endpoint="admin_favorite", name="Favorites"))

    admin.add_view(OrderView(Order, db, category="Sales", endpoint="admin_order", name="Orders"))
    admin.add_view(SecureModelView(OrderLine, db, category="Sales", endpoint="admin_order_line", name="Order Lines"))
    admin.add_view(SecureModelView(Delivery, db, category="Sales", endpoint="admin_delivery", name="Deliveries"))
    admin.add_view(QuoteView(Quote, db, category="Sales", endpoint="admin_quote", name="Quotes"))
    admin.add_view(SecureModelView(QuoteLine, db, category="Sales", endpoint="admin_quote_line", name="Quote Lines"))

    admin.add_link(
        MenuLink(
            name="Logout",
            category="Accounts",
            endpoint="admin.admin_logout",
            icon_type="glyph",
            icon_value="glyphicon-log-out",
        )
    )
    return admin
