from memez.api.routes import router

__all__ = ["router"]
