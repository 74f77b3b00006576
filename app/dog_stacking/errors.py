"""Exceptions raised by the DoG stacking pipeline."""

from __future__ import annotations

from pathlib import Path


class DoGError(Exception):
    """Base class for all DoG stacking errors."""


class InvalidParameterError(DoGError, ValueError):
    """A parameter (sigma, k, radius factor, mode name, image array) is invalid."""


class DimensionMismatchError(DoGError, ValueError):
    """Two images that must share a size do not."""


class ImageDecodeError(DoGError):
    """An input file exists but could not be decoded as an image."""


class ImageEncodeError(DoGError):
    """An output image could not be encoded or written."""


class BatchAbortedError(DoGError):
    """Processing one input failed, so the whole batch was aborted."""

    def __init__(self, path: str | Path, cause: BaseException) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to process image `{path}`: {cause}")
