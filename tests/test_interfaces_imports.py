def test_can_import_all_protocols():
    # Import must succeed and expose the expected names
    import urlf.core.interfaces as I

    assert hasattr(I, "TemplateCacheProtocol")
    assert hasattr(I, "UrlComposerProtocol")
    assert hasattr(I, "LoggerFactoryProtocol")
    assert hasattr(I, "LoggerLikeProtocol")


def test_default_implementations_satisfy_protocols():
    import logging

    import urlf.core.interfaces as I
    from urlf.caching.template_cache import NullTemplateCache, TemplateCache
    from urlf.logging.factory import DefaultLoggerFactory
    from urlf.rendering.composer import UrllibUrlComposer

    assert isinstance(TemplateCache(), I.TemplateCacheProtocol)
    assert isinstance(NullTemplateCache(), I.TemplateCacheProtocol)
    assert isinstance(UrllibUrlComposer(), I.UrlComposerProtocol)
    assert isinstance(DefaultLoggerFactory(), I.LoggerFactoryProtocol)
    assert isinstance(logging.getLogger("urlf"), I.LoggerLikeProtocol)
