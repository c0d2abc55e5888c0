"""
Data models and schemas for the app
"""
from enum import Enum
from typing import Dict, Any, Optional

from .user import User, Session, Profile, Thumbnail


class View(str, Enum):
    """Top-level screens of the studio"""
    LANDING = "landing"
    AUTH = "auth"
    DASHBOARD = "dashboard"


class GenerateRequest:
    """Request model for thumbnail generation"""
    def __init__(self, prompt: str):
        self.prompt = prompt

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'GenerateRequest':
        """Create instance from JSON data"""
        return cls(prompt=data.get('prompt') or '')


class GenerateResponse:
    """Response model for thumbnail generation"""
    def __init__(self,
                 success: bool,
                 credits: int,
                 thumbnail: Optional[Thumbnail] = None,
                 pricing_required: bool = False,
                 error: Optional[str] = None):
        self.success = success
        self.credits = credits
        self.thumbnail = thumbnail
        self.pricing_required = pricing_required
        self.error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            'success': self.success,
            'credits': self.credits
        }

        if self.thumbnail:
            result['thumbnail'] = self.thumbnail.model_dump(mode='json')

        if self.pricing_required:
            result['pricingRequired'] = True

        if self.error:
            result['error'] = self.error

        return result


__all__ = ["User", "Session", "Profile", "Thumbnail", "View", "GenerateRequest", "GenerateResponse"]
