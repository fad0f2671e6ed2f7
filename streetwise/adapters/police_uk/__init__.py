from .client import PoliceUKClient, PoliceApiError, PoliceApiUnavailable

__all__ = ["PoliceUKClient", "PoliceApiError", "PoliceApiUnavailable"]
