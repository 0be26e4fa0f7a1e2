"""Services package for the Slack channel adapter."""

from .attachment_store import LocalAttachmentStore, get_attachment_store, set_attachment_store
from .credentials import SlackCredentials, get_slack_credentials
from .event_pipeline import EventPipeline, get_event_pipeline

__all__ = [
    "LocalAttachmentStore",
    "get_attachment_store",
    "set_attachment_store",
    "SlackCredentials",
    "get_slack_credentials",
    "EventPipeline",
    "get_event_pipeline",
]
