from flask import Blueprint

bp = Blueprint('submissions', __name__)

from bulletin.submissions import routes
