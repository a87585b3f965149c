import logging

from contract_tracker.logics.db import DBManager


logger = logging.getLogger(__name__)


class CoreUtils:
    def __init__(self, database_url: str):
        self.db_url = database_url

    def get_db_manager(self, Model, limit: int = 0, skip: int = 0) -> DBManager:
        logger.debug(f"[CoreUtils] DB manager for {Model.__name__} (limit={limit}, skip={skip})")
        return DBManager(self.db_url, Model, limit, skip)
