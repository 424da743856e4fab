"""klirr - invoicing for freelancers."""

__version__ = "0.1.0"
