from .attractions import router as attractions_router

__all__ = ["attractions_router"]
