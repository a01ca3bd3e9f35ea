from .fs import FileSystemProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol

__all__ = [
    'FileSystemProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
]
