from warden.domain.activity.util.di.provider import ActivityProvider

__all__ = ["ActivityProvider"]
