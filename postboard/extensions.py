"""Flask extension instances, bound to the app in ``create_app``."""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_cors import CORS

db = SQLAlchemy()
migrate = Migrate()
cors = CORS()

# Callers authenticate with bearer tokens only (see postboard.auth);
# no session cookie is ever issued.
login_manager = LoginManager()
login_manager.session_protection = None
