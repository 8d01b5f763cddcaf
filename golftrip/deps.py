from fastapi import Depends
from sqlalchemy.orm import Session

from . import config
from .crud import DatabaseStorage
from .db import get_db
from .storage import MemStorage, Storage

# process-wide instance for GOLFTRIP_STORAGE=memory
mem_storage = MemStorage()


def get_storage(db: Session = Depends(get_db)) -> Storage:
    if config.STORAGE_BACKEND == "memory":
        return mem_storage
    return DatabaseStorage(db)
