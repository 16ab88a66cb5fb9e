from .cache import TemplateCacheProtocol
from .composer import UrlComposerProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol

__all__ = [
    'TemplateCacheProtocol',
    'UrlComposerProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
]
