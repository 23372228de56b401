"""
FastAPI application entry point.

Run:  python -m uvicorn app.main:app --port 8000

The hosts file and backup directory come from the environment, see
:mod:`infrastructure.config`.
"""
from __future__ import annotations

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
)

from fastapi import FastAPI

from services.hosts_service import HostsService
from infrastructure.config import load_config
from app.routes import router, init_service

logger = logging.getLogger(__name__)

app = FastAPI(title="Hosts Editor")

service = HostsService.from_config(load_config())
_init = service.initialize()
if not _init.success:
    logger.error("%s (%s)", _init.error, _init.details)

init_service(service)

app.include_router(router)
