from genuka_auth.models.company import Company

__all__ = ["Company"]
