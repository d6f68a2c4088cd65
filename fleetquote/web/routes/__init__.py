"""FleetQuote web route modules.

Each module exports a `router` (APIRouter instance) included by
fleetquote.web.app.
"""

from fleetquote.web.routes import configuration

__all__ = ["configuration"]
