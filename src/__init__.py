"""Image Share Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless image sharing service with ownership, hiding and search "
    "using AWS Lambda, DynamoDB and local blob storage"
)

__all__ = ["handlers", "core"]
