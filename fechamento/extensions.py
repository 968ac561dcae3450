# fechamento/extensions.py
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_mail import Mail

db = SQLAlchemy()
cors = CORS()  # configured in create_app via cors.init_app(app, ...)
mail = Mail()
