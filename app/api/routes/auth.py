from flask import Blueprint, jsonify, current_app
from sqlalchemy import or_
from app.models import User
from app.extensions import db
from app.schemas import RegisterRequest, LoginRequest
from app.utils.decorators import issue_token, validate_body
from werkzeug.security import generate_password_hash, check_password_hash

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
@validate_body(RegisterRequest)
def register(payload):
    if User.query.filter_by(email=payload.email).first():
        return jsonify({'error': 'Email already exists'}), 400

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=generate_password_hash(payload.password),
        role='user'
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"User {user.email} registered as {user.role}")
    return jsonify({'message': 'User registered', 'user': user.to_dict()}), 201


@auth_bp.route('/login', methods=['POST'])
@validate_body(LoginRequest)
def login(payload):
    user = User.query.filter(
        or_(User.email == payload.identifier, User.name == payload.identifier)
    ).first()

    if not user or not check_password_hash(user.password_hash, payload.password):
        return jsonify({'error': 'Invalid credentials'}), 401

    return jsonify({
        'token': issue_token(user),
        'name': user.name,
        'email': user.email,
        'role': user.role
    })
