from routes.auth import auth_bp
from routes.catalog import catalog_bp
from routes.client import client_bp
from routes.supplier import supplier_bp
from routes.admin import admin_bp


def blue_print(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(client_bp)
    app.register_blueprint(supplier_bp)
    app.register_blueprint(admin_bp)
