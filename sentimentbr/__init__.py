"""EcoBit sentiment analysis service for Brazilian-Portuguese text."""

__version__ = "1.0.0"
