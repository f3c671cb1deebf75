"""Extract API description documents from Python web applications in memory."""

__version__ = "0.1.0"
