"""AWS Lambda handler for the wiki event calendar."""
import json
import logging
import os
import time
from typing import Dict, Any

import requests
from botocore.exceptions import BotoCoreError

from processor.config import (
    ConfigurationError,
    build_calendar_request,
    load_settings,
    parse_options
)
from processor.event_aggregator import EventAggregator
from processor.snippet_provider import SnippetProvider
from storage.snippet_cache import SnippetCache
from wiki.mediawiki_client import MediaWikiClient, WikiApiError


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _error_response(status_code: int, message: str, error: Exception,
                    start_time: float) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'body': json.dumps({
            'message': message,
            'error': str(error),
            'error_type': type(error).__name__,
            'duration_seconds': round(time.time() - start_time, 2)
        })
    }


def _request_options(event: Dict[str, Any]) -> Dict[str, str]:
    """Options come as a tag body ("config") or as a mapping ("options")."""
    if event.get('options'):
        return dict(event['options'])
    return parse_options(event.get('config') or '')


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the event calendar.

    Args:
        event: Request payload with "config" or "options"
        context: Lambda context object

    Returns:
        Response dict with statusCode and the calendar events
    """
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info("Lambda execution started")

    try:
        settings = load_settings()
        setup_logging(settings.log_level)
        request = build_calendar_request(_request_options(event or {}))

        client = MediaWikiClient(
            api_url=settings.wiki_api_url,
            article_path=settings.article_path,
            timeout=settings.timeout_seconds
        )
        cache = None
        if settings.snippet_table_name:
            try:
                cache = SnippetCache(table_name=settings.snippet_table_name)
            except BotoCoreError as e:
                logger.warning(
                    f"Snippet cache unavailable, rendering without it: {e}"
                )
        snippet_provider = SnippetProvider(
            document_store=client,
            renderer=client,
            cache=cache,
            ttl_seconds=settings.snippet_ttl_seconds
        )
        aggregator = EventAggregator(
            document_store=client,
            snippet_provider=snippet_provider,
            reference_year=settings.reference_year
        )

        try:
            events = aggregator.build_events(request)
        except (requests.RequestException, WikiApiError) as e:
            logger.error(
                f"Failed to read calendar pages from the wiki: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _error_response(
                502, 'Failed to read calendar pages', e, start_time
            )

        duration = time.time() - start_time
        logger.info(
            f"Lambda execution completed successfully",
            extra={
                'duration_seconds': round(duration, 2),
                'events_returned': len(events)
            }
        )

        return {
            'statusCode': 200,
            'body': json.dumps({
                'message': 'Calendar built successfully',
                'events': [e.to_dict() for e in events],
                'modules': [settings.calendar_module],
                'statistics': {
                    'titles_scanned': aggregator.titles_scanned,
                    'events_returned': len(events),
                    'duration_seconds': round(duration, 2)
                }
            })
        }

    except ConfigurationError as e:
        logger.error(f"Invalid calendar configuration: {str(e)}")
        return _error_response(
            400, 'Invalid calendar configuration', e, start_time
        )

    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response(500, 'Calendar build failed', e, start_time)
