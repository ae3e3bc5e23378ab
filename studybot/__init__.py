"""Study Bot - AI academic assistant chat backend."""

__version__ = "1.0.0"
