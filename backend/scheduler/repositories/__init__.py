# SQLAlchemy repositories returning domain entities
