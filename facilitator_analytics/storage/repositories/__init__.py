from facilitator_analytics.storage.repositories.base_repository import BaseRepository, TransferEventsRepository
from facilitator_analytics.storage.repositories.facilitator_repository import FacilitatorRepository
from facilitator_analytics.storage.repositories.seller_repository import SellerRepository
from facilitator_analytics.storage.repositories.statistics_repository import StatisticsRepository

__all__ = [
    'BaseRepository',
    'TransferEventsRepository',
    'FacilitatorRepository',
    'SellerRepository',
    'StatisticsRepository',
]
