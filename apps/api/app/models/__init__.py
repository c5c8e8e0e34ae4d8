# Import SQLAlchemy models so they register on Base.metadata
from app.models.order_document import OrderDocument  # noqa: F401
