# eats/api/v1/router.py
from fastapi import APIRouter
from eats.api.v1.endpoints import categories, dishes, orders, restaurants, subscriptions, users


api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(restaurants.router)
api_router.include_router(categories.router)
api_router.include_router(dishes.router)
api_router.include_router(orders.router)
api_router.include_router(subscriptions.router)
