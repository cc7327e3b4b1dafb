"""Developer token package exports."""

from .models import TokenRecord, TokenStatus
from .router import router
from .service import TokenRegistry

__all__ = ["router", "TokenRecord", "TokenRegistry", "TokenStatus"]
