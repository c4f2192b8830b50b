# routes/__init__.py
# Shared helpers for the JSON blueprints

from functools import wraps

from flask import jsonify, session


def login_required(f):
    """The auth service signs the session cookie; we only read user_id from it."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            return jsonify({'success': False, 'error': 'unauthenticated', 'message': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def current_user_id():
    return session.get('user_id')


def ok(data=None, **extra):
    payload = {'success': True, 'data': data}
    payload.update(extra)
    return jsonify(payload)
