"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.catalog.driven_adapter.model.event_model import EventModel
from src.service.catalog.driven_adapter.model.seat_category_model import SeatCategoryModel

__all__ = [
    'EventModel',
    'SeatCategoryModel',
]
