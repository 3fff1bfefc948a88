# eteeap/routes/health.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import psutil
import datetime
import sys
import os
import logging

from eteeap.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/health",
    tags=["Health Check"]
)


@router.get("")
def health_check(db: Session = Depends(get_db)):
    """
    Database connectivity plus process and host memory
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now().isoformat(),
        "service": "ETEEAP Admissions API",
        "version": "1.0.0",
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = {"status": "connected", "dialect": db.get_bind().dialect.name}
    except SQLAlchemyError as e:
        logger.error(f"Health check database failure: {e}")
        health_status["database"] = {"status": "disconnected"}
        health_status["status"] = "degraded"

    process = psutil.Process(os.getpid())
    health_status["system"] = {
        "python_version": sys.version,
        "platform": sys.platform,
        "process_memory_mb": round(process.memory_info().rss / (1024 ** 2), 2),
        "memory_percent": psutil.virtual_memory().percent,
    }

    logger.info(f"Health check completed: {health_status['status']}")
    return health_status
