from flask import Blueprint

bp = Blueprint('admin', __name__)

from bulletin.admin import routes
