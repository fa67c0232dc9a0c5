"""EduConnect - question and answer platform API."""

__version__ = "0.1.0"
