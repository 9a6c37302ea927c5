from flask import Blueprint

bp = Blueprint('auth', __name__)

from bulletin.auth import routes
