"""Exceptions raised while turning a submission into a notification document."""


class RenderingError(Exception):
    """Base exception for rendering errors."""

    pass


class DocumentRenderError(RenderingError):
    """Raised when a template fails to render or a context cannot be built."""

    pass
