import logging
from typing import Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .accounts import AdminAccountService, CredentialService
from .config import load_config
from .errors import GENERIC_ERROR_MESSAGE, ServiceError
from .models import OrderStatus
from .orders import OrderIntakeService, OrderLifecycleService, OrderQueryService
from .stores import Stores, open_stores


def create_app(config: Optional[Dict] = None, stores: Optional[Stores] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # --- Configuration ---
    app.config.update(load_config(config))
    log_level = app.config["LOG_LEVEL"]
    logging.basicConfig(level=log_level)
    app.logger.setLevel(log_level)

    # --- Initialize extensions ---
    CORS(
        app,
        origins=[app.config["CORS_ORIGIN"]],
        methods=app.config["CORS_METHODS"],
    )

    if stores is None:
        stores = open_stores(app)
    app.extensions["stores"] = stores

    credentials = CredentialService(stores.accounts, rounds=app.config["BCRYPT_ROUNDS"])
    admin_accounts = AdminAccountService(stores.accounts)
    intake = OrderIntakeService(stores.orders)
    queries = OrderQueryService(stores.orders)
    lifecycle = OrderLifecycleService(
        stores.orders, enforce_order=app.config["ENFORCE_STATUS_ORDER"]
    )

    # --- Error handling ---

    @app.errorhandler(ServiceError)
    def handle_service_error(exc: ServiceError):
        return jsonify(exc.to_payload()), exc.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": GENERIC_ERROR_MESSAGE}), 500

    # --- Accounts ---

    def read_json_object() -> Dict:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, dict) else {}

    @app.route("/register", methods=["POST"])
    def register():
        payload = read_json_object()
        user = credentials.register(
            payload.get("email"), payload.get("phone"), payload.get("password")
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": "User registered successfully!",
                    "user": user,
                }
            ),
            201,
        )

    @app.route("/login", methods=["POST"])
    def login():
        payload = read_json_object()
        user = credentials.login(payload.get("email"), payload.get("password"))
        return jsonify({"success": True, "message": "Login successful!", "user": user})

    # --- Orders ---

    @app.route("/submit-payment", methods=["POST"])
    def submit_payment():
        payload = read_json_object()
        app.logger.debug("Received payment data: %s", payload)
        intake.submit_order(payload)
        return (
            jsonify(
                {"success": True, "message": "Payment information saved successfully!"}
            ),
            201,
        )

    @app.route("/orders", methods=["GET"])
    def list_orders():
        orders = queries.list_orders_by_email(request.args.get("email"))
        return jsonify({"success": True, "orders": orders})

    # --- Admin ---

    @app.route("/admin/registered-users", methods=["GET"])
    def list_registered_users():
        return jsonify({"success": True, "users": admin_accounts.list_accounts()})

    @app.route("/admin/delete-user/<user_id>", methods=["DELETE"])
    def delete_user(user_id: str):
        admin_accounts.delete_account(user_id)
        return jsonify({"success": True, "message": "User deleted successfully!"})

    def list_requests(status: OrderStatus):
        return jsonify({"success": True, "requests": queries.list_orders_by_status(status)})

    @app.route("/admin/pending-requests", methods=["GET"])
    def pending_requests():
        return list_requests(OrderStatus.PENDING)

    @app.route("/admin/accepted-requests", methods=["GET"])
    def accepted_requests():
        return list_requests(OrderStatus.ACCEPTED)

    @app.route("/admin/finished-requests", methods=["GET"])
    def finished_requests():
        return list_requests(OrderStatus.DELIVERED)

    @app.route("/admin/accept-request/<order_id>", methods=["PUT"])
    def accept_request(order_id: str):
        lifecycle.accept(order_id)
        return jsonify({"success": True, "message": "Request accepted successfully!"})

    @app.route("/admin/deliver-request/<order_id>", methods=["PUT"])
    def deliver_request(order_id: str):
        lifecycle.deliver(order_id)
        return jsonify({"success": True, "message": "Request marked as delivered!"})

    # --- Misc ---

    @app.route("/api", methods=["GET"])
    def welcome():
        return "Welcome to the Payment API", 200, {"Content-Type": "text/plain"}

    @app.route("/", defaults={"unknown_path": ""}, methods=["GET"])
    @app.route("/<path:unknown_path>", methods=["GET"])
    def page_not_found(unknown_path: str):
        return "404, Page Not Found", 404, {"Content-Type": "text/plain"}

    return app
