# erp/api/router.py
from fastapi import APIRouter, Depends

from erp.api import (
    routes_auth,
    routes_masters,
    routes_indents,
    routes_work_orders,
    routes_purchase_orders,
)
from erp.api.deps import guard_api_access

api_router = APIRouter()

# public (login / refresh); /auth/me authenticates itself
api_router.include_router(routes_auth.router)

# everything else passes the access table first
guarded = APIRouter(dependencies=[Depends(guard_api_access)])
for r in routes_masters.routers:
    guarded.include_router(r)
guarded.include_router(routes_indents.router)
guarded.include_router(routes_work_orders.router)
guarded.include_router(routes_purchase_orders.router)

api_router.include_router(guarded)
