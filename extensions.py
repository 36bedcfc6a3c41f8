from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Extensions are created unbound and attached in create_app()

# Durable storage backend (STORAGE_BACKEND=sql)
db = SQLAlchemy()

# Session-backed authentication
login_manager = LoginManager()
