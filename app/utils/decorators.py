from functools import wraps
from datetime import datetime, timedelta, timezone
from flask import request, jsonify, current_app
from pydantic import ValidationError
import jwt
from app.extensions import db
from app.models.user import User

def issue_token(user):
    return jwt.encode({
        'user_id': user.id,
        'role': user.role,
        'exp': datetime.now(timezone.utc) + timedelta(hours=current_app.config['TOKEN_TTL_HOURS'])
    }, current_app.config['SECRET_KEY'], algorithm="HS256")

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        auth_header = request.headers.get('Authorization', '')
        # Bearer <token>
        if auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]

        if not token:
            return jsonify({'error': 'Token is missing!'}), 401

        try:
            data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            return jsonify({'error': 'Token is invalid!', 'details': str(e)}), 401

        current_user = db.session.get(User, data.get('user_id'))
        if not current_user:
            return jsonify({'error': 'Token is invalid!', 'details': 'User not found'}), 401

        return f(current_user, *args, **kwargs)

    return decorated

def admin_required(f):
    # Stack under token_required, which passes current_user as the first arg
    @wraps(f)
    def decorated(current_user, *args, **kwargs):
        if not current_user.is_admin:
            return jsonify({'error': 'Admin privilege required'}), 403
        return f(current_user, *args, **kwargs)
    return decorated

def validate_body(schema):
    """Validate the JSON body against a pydantic model and pass it as `payload`."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            data = request.get_json(silent=True)
            if data is None:
                return jsonify({'error': 'No input data provided'}), 400
            try:
                payload = schema.model_validate(data)
            except ValidationError as e:
                return jsonify({
                    'error': 'Invalid request body',
                    'details': e.errors(include_url=False, include_context=False)
                }), 400
            return f(*args, payload=payload, **kwargs)
        return decorated
    return decorator
