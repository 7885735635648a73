"""Label OCR Check - verifies submitted label fields against OCR text."""

__version__ = "1.0.0"
