"""FleetQuote - forklift configuration matrix catalog and quote pricing engine."""

__version__ = "0.1.0"
