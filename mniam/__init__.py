"""A bot player for the mniAM arena game: AMCOM framing, payloads, steering and a TCP client."""

__version__ = "0.1.0"
__all__ = ["protocol", "packets", "strategy", "client"]