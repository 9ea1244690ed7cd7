from .resolve_player import ResolvePlayerUseCase

__all__ = ["ResolvePlayerUseCase"]
