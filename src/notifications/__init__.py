from .sink import NotificationSink
from .sounds import notification_chime, notification_chime_data_uri
from .speaker import SpeakerPlayback

__all__ = [
    "NotificationSink",
    "SpeakerPlayback",
    "notification_chime",
    "notification_chime_data_uri",
]
