"""
Exceptions raised by canvas_clip.
"""


class LoadError(Exception):
    """
    The source image could not be fetched or decoded.

    Load failures are terminal for a pipeline: the load task, the exec task
    and both result accessors re-raise the same error.

    .. py:attribute:: source

        The source identifier the pipeline was constructed with.

    .. py:attribute:: reason

        Human readable description of the failure.
    """

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        super().__init__(source, reason)

    def __str__(self) -> str:
        source = self.source
        if len(source) > 64:
            source = source[:61] + "..."
        if self.reason:
            return "Failed to load %r: %s" % (source, self.reason)
        return "Failed to load %r" % (source,)
