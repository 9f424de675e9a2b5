"""
Exceptions raised by a layout pass.

Every error aborts the whole pass; no partially populated layout is returned.
"""


class LayoutError(Exception):
    """Base class for all layout failures."""


class MalformedTreeError(LayoutError, ValueError):
    """The tree could not be parsed or has an unusable topology."""


class MissingAttributeError(LayoutError, LookupError):
    """A layer, or one of its visual/view attributes, is absent from the configuration."""

    def __init__(self, index, key=None, section="layer", message=None):
        self.index = index
        self.key = key
        self.section = section
        if message is not None:
            msg = message
        elif key is None:
            msg = f"No configuration for layer {index!r}"
        else:
            msg = f"Layer {index!r} has no {section} attribute {key!r}"
        super().__init__(msg)
