from .config import PostureConfig
from .data_uri import ImageDataUri, parse_image_data_uri
from .errors import PostureAnalysisError, PostureConfigurationError, PostureError
from .service import PostureAnalyzer, parse_analysis
from .types import PostureAnalysis

__all__ = [
    "ImageDataUri",
    "PostureAnalysis",
    "PostureAnalysisError",
    "PostureAnalyzer",
    "PostureConfig",
    "PostureConfigurationError",
    "PostureError",
    "parse_analysis",
    "parse_image_data_uri",
]
