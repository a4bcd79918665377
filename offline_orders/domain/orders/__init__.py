"""Orders domain - offline order intake, listing, state machine and ERP sync"""

from .router import router

__all__ = ["router"]
