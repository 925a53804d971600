from datetime import datetime

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utc_today():
    """Calendar date on the same UTC clock the timestamp columns use"""
    return datetime.utcnow().date()
