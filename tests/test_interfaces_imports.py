def test_can_import_all_protocols():
    # Import must succeed and expose the expected names
    import atref.core.interfaces as I

    assert hasattr(I, "FileSystemProtocol")
    assert hasattr(I, "LoggerFactoryProtocol")
    assert hasattr(I, "LoggerLikeProtocol")


def test_default_implementations_satisfy_protocols():
    import logging

    from atref.core.interfaces import FileSystemProtocol, LoggerFactoryProtocol, LoggerLikeProtocol
    from atref.io.filesystem import LocalFileSystem, MemoryFileSystem
    from atref.logging.factory import DefaultLoggerFactory

    assert isinstance(LocalFileSystem(), FileSystemProtocol)
    assert isinstance(MemoryFileSystem(), FileSystemProtocol)
    assert isinstance(DefaultLoggerFactory(), LoggerFactoryProtocol)
    assert isinstance(logging.getLogger("atref.test"), LoggerLikeProtocol)


def test_public_api_is_exported():
    import atref

    for name in atref.__all__:
        assert hasattr(atref, name), name
