"""Failures raised by the inference engine."""


class ClassificationError(Exception):
    """Base class for anything that prevents a comment from being scored."""


class ModelUnavailable(ClassificationError):
    """The model could not be loaded, or its forward pass failed."""


class MalformedInput(ClassificationError):
    """The encoded sequence does not have the length the model expects."""
