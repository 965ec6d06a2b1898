"""
Business logic for image search.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.aws.dynamodb_metadata import DynamoDBMetadata
from core.models.commands import SearchCommand
from core.models.errors import ImageServiceError
from core.models.outcomes import SearchOutcome, SearchStatus
from core.repositories.metadata_repository import ImageMetadataRepository
from core.utils.config import ServiceConfig
from core.utils.constants import SEARCH_EARLIEST_TIMESTAMP
from core.utils.time import utc_now_epoch

logger = Logger(UTC=True)


class SearchService:
    """Application service responsible for searching visible images.

    This service coordinates:
    - Rejecting searches when they are administratively disabled
    - Rejecting searches without any predicate
    - Normalizing one-sided time ranges
    - Querying the metadata store
    """

    def __init__(self, *, metadata: ImageMetadataRepository, allow_search: bool) -> None:
        self.metadata = metadata
        self.allow_search = allow_search

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "SearchService":
        return cls(
            metadata=DynamoDBMetadata(DynamoDBAdapter(config.metadata_table_name)),
            allow_search=config.allow_search,
        )

    @staticmethod
    def normalize_time_range(min_time: int, max_time: int) -> tuple[int, int]:
        """Close a one-sided time range.

        A missing lower bound becomes the earliest timestamp, a missing
        upper bound becomes the current time.
        """
        if min_time <= 0 < max_time:
            return SEARCH_EARLIEST_TIMESTAMP, max_time
        if max_time <= 0 < min_time:
            return min_time, utc_now_epoch()
        return min_time, max_time

    def search(self, command: SearchCommand) -> SearchOutcome:
        context = {"address": command.requester_address}

        if not self.allow_search:
            logger.warning("Search attempted while searching is disabled", extra=context)
            return SearchOutcome.of(SearchStatus.FORBIDDEN)

        if command.is_empty:
            logger.debug("Search request without predicates", extra=context)
            return SearchOutcome.of(SearchStatus.MALFORMED)

        min_time, max_time = self.normalize_time_range(command.min_time, command.max_time)
        if min_time > 0 and max_time > 0 and min_time > max_time:
            logger.debug(
                "Search time range is empty",
                extra={**context, "min_time": min_time, "max_time": max_time},
            )
            return SearchOutcome.of(SearchStatus.FOUND, results=[])

        predicates = {
            "image_format": command.format or None,
            "uploader": command.uploader or None,
            "client": command.client or None,
            "min_time": min_time if min_time > 0 else None,
            "max_time": max_time if max_time > 0 else None,
        }

        try:
            images = self.metadata.search_images(**predicates)
        except ImageServiceError:
            logger.exception("Failed to execute search", extra={**context, **predicates})
            return SearchOutcome.of(SearchStatus.INTERNAL_ERROR)

        logger.debug("Search executed", extra={**context, **predicates, "count": len(images)})
        return SearchOutcome.of(
            SearchStatus.FOUND,
            results=[image.to_public() for image in images],
        )
