"""
Auth Routes

Flask routes for registration, login and password reset.
"""

from flask import Blueprint, request

from ..responses import json_endpoint, parse_model, success
from .models import ForgotPasswordRequest, LoginRequest, RegisterRequest
from .services import AuthService


def create_auth_blueprint(auth_service: AuthService) -> Blueprint:
    """Create auth blueprint with routes."""
    bp = Blueprint('auth', __name__)

    @bp.route('/register', methods=['POST'])
    @json_endpoint("Failed to register user.")
    def register():
        body = parse_model(RegisterRequest, request.get_json(silent=True))
        user = auth_service.register(body.email, body.password, body.name)
        return success("User registered successfully", user, 201)

    @bp.route('/login', methods=['POST'])
    @json_endpoint("Failed to log in.")
    def login():
        body = parse_model(LoginRequest, request.get_json(silent=True))
        return success("Login successful", auth_service.login(body.email, body.password))

    @bp.route('/forgot-password', methods=['POST'])
    @json_endpoint("Failed to create password reset.")
    def forgot_password():
        body = parse_model(ForgotPasswordRequest, request.get_json(silent=True))
        token = auth_service.create_reset_token(body.email)
        return success("Password reset link sent", {"token": token})

    return bp
