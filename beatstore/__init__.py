# beatstore/__init__.py
from flask import Blueprint

beatstore_bp = Blueprint('beatstore', __name__)

# Import routes and models to make them available
from . import routes, models
