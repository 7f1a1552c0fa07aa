from fastapi import FastAPI

from .config import configure_logging
from .routes.gateway import router as gateway_router, interfaces_router


configure_logging()

app = FastAPI(title="LAN Network")

app.include_router(gateway_router, prefix="/api/gateway", tags=["gateway"])
app.include_router(interfaces_router, prefix="/api/interfaces", tags=["interfaces"])
