"""
UpTask API
Shared SQLAlchemy instance. Model modules import ``db`` from here.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
