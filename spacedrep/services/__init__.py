"""Services that drive the scheduling engine on behalf of the application."""

from .reviews import CardNotFoundError, DueOverview, ReviewService, ReviewSubmission

__all__ = ["CardNotFoundError", "DueOverview", "ReviewService", "ReviewSubmission"]
